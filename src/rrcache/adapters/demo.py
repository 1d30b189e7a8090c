"""Canned demo dataset served as a record store."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from rrcache.errors import StorageError, ValidationError
from rrcache.models import ProjectDetail, ProjectList

logger = logging.getLogger(__name__)

_BUCKET = "gs://buildflow-demo.appspot.com"


def _image(project_id: str, kind: str, name: str) -> str:
    return f"{_BUCKET}/projects/demo/{project_id}/images/{kind}/{name}"


def _search(terms: str) -> str:
    return f"https://www.amazon.com/s?k={terms}"


DEMO_PROJECTS: list[dict[str, Any]] = [
    {
        "id": "keyboard",
        "productName": "Custom Mechanical Keyboard",
        "thumbnailURL": f"{_BUCKET}/images/thumbnails/keyboard.jpg",
        "manualPath": "projects/demo/keyboard",
        "imagePath": "projects/demo/keyboard/images",
        "createdAt": "2024-01-15T10:30:00Z",
        "totalPrice": 91.74,
        "stepCount": 2,
    },
    {
        "id": "lamp",
        "productName": "Modern Table Lamp",
        "thumbnailURL": f"{_BUCKET}/images/thumbnails/lamp.jpg",
        "manualPath": "projects/demo/lamp",
        "imagePath": "projects/demo/lamp/images",
        "createdAt": "2024-01-16T14:20:00Z",
        "totalPrice": 24.49,
        "stepCount": 2,
    },
    {
        "id": "logo",
        "productName": "University Logo Display",
        "thumbnailURL": f"{_BUCKET}/images/thumbnails/logo.jpg",
        "manualPath": "projects/demo/logo",
        "imagePath": "projects/demo/logo/images",
        "createdAt": "2024-01-17T14:20:00Z",
        "totalPrice": 48.97,
        "stepCount": 3,
    },
]

DEMO_DETAILS: dict[str, dict[str, list[dict[str, Any]]]] = {
    "keyboard": {
        "steps": [
            {
                "stepNumber": 1,
                "title": "Prepare the PCB",
                "description": "Unpack the PCB and inspect for any damage. "
                "Clean the surface with isopropyl alcohol.",
                "imageURL": _image("keyboard", "steps", "step-1.jpg"),
                "estimatedTime": 15,
                "tools": ["Isopropyl alcohol", "Lint-free cloth"],
                "notes": "Handle the PCB carefully to avoid static damage",
            },
            {
                "stepNumber": 2,
                "title": "Install Switches",
                "description": "Insert mechanical switches into the PCB. "
                "Ensure they click into place securely.",
                "imageURL": _image("keyboard", "steps", "step-2.jpg"),
                "estimatedTime": 30,
                "tools": ["Mechanical switches"],
                "notes": "Test each switch before final installation",
            },
        ],
        "materials": [
            {
                "id": "pcb-60-percent",
                "name": "60% Mechanical Keyboard PCB",
                "description": "Hot-swappable PCB with USB-C connector",
                "quantity": 1,
                "unitPrice": 45.99,
                "totalPrice": 45.99,
                "imageURL": _image("keyboard", "materials", "pcb.jpg"),
                "amazonURL": _search("mechanical+keyboard+pcb"),
                "category": "Electronics",
            },
            {
                "id": "switches-cherry-mx",
                "name": "Cherry MX Blue Switches",
                "description": "Tactile mechanical switches with audible click",
                "quantity": 61,
                "unitPrice": 0.75,
                "totalPrice": 45.75,
                "imageURL": _image("keyboard", "materials", "switches.jpg"),
                "amazonURL": _search("cherry+mx+switches"),
                "category": "Electronics",
            },
        ],
    },
    "lamp": {
        "steps": [
            {
                "stepNumber": 1,
                "title": "Prepare the Base",
                "description": "Sand the wooden base smooth and apply wood stain evenly.",
                "imageURL": _image("lamp", "steps", "step-1.jpg"),
                "estimatedTime": 20,
                "tools": ["Sandpaper", "Wood stain", "Brush"],
                "notes": "Work in a well-ventilated area",
            },
            {
                "stepNumber": 2,
                "title": "Install Wiring",
                "description": "Thread the electrical wire through the base "
                "and connect to the socket.",
                "imageURL": _image("lamp", "steps", "step-2.jpg"),
                "estimatedTime": 25,
                "tools": ["Wire strippers", "Screwdriver"],
                "notes": "Ensure power is disconnected during wiring",
            },
        ],
        "materials": [
            {
                "id": "wood-base",
                "name": "Wooden Lamp Base",
                "description": "Pre-cut wooden base for table lamp",
                "quantity": 1,
                "unitPrice": 15.99,
                "totalPrice": 15.99,
                "imageURL": _image("lamp", "materials", "wood-base.jpg"),
                "amazonURL": _search("wooden+lamp+base"),
                "category": "Wood",
            },
            {
                "id": "lamp-socket",
                "name": "E26 Lamp Socket",
                "description": "Standard screw-in lamp socket with switch",
                "quantity": 1,
                "unitPrice": 8.5,
                "totalPrice": 8.5,
                "imageURL": _image("lamp", "materials", "socket.jpg"),
                "amazonURL": _search("lamp+socket+e26"),
                "category": "Electronics",
            },
        ],
    },
    "logo": {
        "steps": [
            {
                "stepNumber": 1,
                "title": "Design the Logo Layout",
                "description": "Create the logo design using vector graphics "
                "software and prepare it for cutting.",
                "imageURL": _image("logo", "steps", "step-1.jpg"),
                "estimatedTime": 30,
                "tools": ["Computer", "Design software", "Printer"],
                "notes": "Ensure logo proportions are accurate",
            },
            {
                "stepNumber": 2,
                "title": "Cut the Base Material",
                "description": "Cut the wooden base to the required dimensions "
                "for the logo display.",
                "imageURL": _image("logo", "steps", "step-2.jpg"),
                "estimatedTime": 25,
                "tools": ["Saw", "Sandpaper", "Measuring tape"],
                "notes": "Sand all edges smooth",
            },
            {
                "stepNumber": 3,
                "title": "Apply Logo Design",
                "description": "Transfer the logo design to the base material "
                "using stencils or vinyl.",
                "imageURL": _image("logo", "steps", "step-3.jpg"),
                "estimatedTime": 40,
                "tools": ["Stencils", "Paint", "Brushes"],
                "notes": "Use the official colors: maroon and white",
            },
        ],
        "materials": [
            {
                "id": "wood-base-logo",
                "name": "Wooden Display Base",
                "description": "High-quality wood base for logo display",
                "quantity": 1,
                "unitPrice": 25.99,
                "totalPrice": 25.99,
                "imageURL": _image("logo", "materials", "wood-base.jpg"),
                "amazonURL": _search("wooden+display+base"),
                "category": "Wood",
            },
            {
                "id": "maroon-paint",
                "name": "Maroon Paint",
                "description": "Official maroon color paint",
                "quantity": 1,
                "unitPrice": 12.99,
                "totalPrice": 12.99,
                "imageURL": _image("logo", "materials", "maroon-paint.jpg"),
                "amazonURL": _search("maroon+paint"),
                "category": "Paint",
            },
            {
                "id": "white-paint",
                "name": "White Paint",
                "description": "High-quality white paint for logo details",
                "quantity": 1,
                "unitPrice": 9.99,
                "totalPrice": 9.99,
                "imageURL": _image("logo", "materials", "white-paint.jpg"),
                "amazonURL": _search("white+paint"),
                "category": "Paint",
            },
        ],
    },
}


class DemoRecordStore:
    """Record store backed by the canned demo dataset.

    ``latency`` (seconds) simulates a remote round trip.
    """

    def __init__(self, *, latency: float = 0.0) -> None:
        self._latency = latency

    async def _pause(self) -> None:
        if self._latency:
            await asyncio.sleep(self._latency)

    async def load_list(self) -> ProjectList:
        """Load the project list."""
        await self._pause()
        projects = ProjectList.from_dict({"projects": DEMO_PROJECTS, "hasMore": False})
        logger.debug(f"Loaded demo projects: {[p.id for p in projects.projects]}")
        return projects

    async def load_detail(self, project_id: str) -> ProjectDetail:
        """Load one project with its steps and materials."""
        if not project_id:
            raise ValidationError("Project id must not be empty")
        await self._pause()
        summary = next((p for p in DEMO_PROJECTS if p["id"] == project_id), None)
        if summary is None:
            raise StorageError(f"Project not found: {project_id}")
        return ProjectDetail.from_dict({"project": summary, **DEMO_DETAILS[project_id]})
