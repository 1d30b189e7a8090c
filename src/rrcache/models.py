"""Project record types and payload parsing.

Payloads use the camelCase field names of the record store. Parsing
validates each record and raises ``ValidationError`` listing every problem
found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from rrcache.errors import ValidationError

logger = logging.getLogger(__name__)


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _is_number(value: Any, minimum: float) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value >= minimum
    )


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Invalid createdAt: {value!r}") from e


def _require_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{what} must be an object")
    return data


def _raise_if(errors: list[str], what: str, data: Any) -> None:
    if errors:
        raise ValidationError(
            f"{what} validation failed: {', '.join(errors)}", details=data
        )


@dataclass(frozen=True, slots=True)
class ProjectSummary:
    """A project as shown in the list view."""

    id: str
    product_name: str
    thumbnail_url: str
    total_price: float
    step_count: int
    manual_path: str = ""
    image_path: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ProjectSummary:
        data = _require_mapping(data, "Project")
        errors = []
        if not _is_text(data.get("id")):
            errors.append("Project must have a valid id")
        if not _is_text(data.get("productName")):
            errors.append("Project must have a valid productName")
        if not _is_text(data.get("thumbnailURL")):
            errors.append("Project must have a valid thumbnailURL")
        if not _is_number(data.get("totalPrice"), 0):
            errors.append("Project must have a valid totalPrice")
        if not _is_number(data.get("stepCount"), 1):
            errors.append("Project must have a valid stepCount")
        _raise_if(errors, "Project", data)

        return cls(
            id=data["id"],
            product_name=data["productName"],
            thumbnail_url=data["thumbnailURL"],
            total_price=float(data["totalPrice"]),
            step_count=int(data["stepCount"]),
            manual_path=data.get("manualPath", ""),
            image_path=data.get("imagePath", ""),
            created_at=_parse_timestamp(data.get("createdAt")),
        )


@dataclass(frozen=True, slots=True)
class Step:
    """One instruction page."""

    step_number: int
    title: str
    description: str
    image_url: str
    estimated_time: int  # minutes
    tools: tuple[str, ...] = ()
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> Step:
        label = f"Step {index + 1}"
        data = _require_mapping(data, label)
        errors = []
        if not _is_number(data.get("stepNumber"), 1):
            errors.append(f"{label} must have a valid stepNumber")
        for name in ("title", "description"):
            if not _is_text(data.get(name)):
                errors.append(f"{label} must have a valid {name}")
        if not _is_text(data.get("imageURL")):
            errors.append(f"{label} must have a valid imageURL")
        if not _is_number(data.get("estimatedTime"), 0):
            errors.append(f"{label} must have a valid estimatedTime")
        if not isinstance(data.get("tools"), list):
            errors.append(f"{label} must have a valid tools array")
        _raise_if(errors, "Steps", data)

        return cls(
            step_number=int(data["stepNumber"]),
            title=data["title"],
            description=data["description"],
            image_url=data["imageURL"],
            estimated_time=int(data["estimatedTime"]),
            tools=tuple(str(tool) for tool in data["tools"]),
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True, slots=True)
class Material:
    """One line of the materials bill."""

    id: str
    name: str
    quantity: int
    unit_price: float
    total_price: float
    category: str
    description: str = ""
    image_url: str = ""
    purchase_url: str = ""

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> Material:
        label = f"Material {index + 1}"
        data = _require_mapping(data, label)
        errors = []
        for name in ("id", "name"):
            if not _is_text(data.get(name)):
                errors.append(f"{label} must have a valid {name}")
        if not _is_number(data.get("quantity"), 1):
            errors.append(f"{label} must have a valid quantity")
        if not _is_number(data.get("unitPrice"), 0):
            errors.append(f"{label} must have a valid unitPrice")
        if not _is_number(data.get("totalPrice"), 0):
            errors.append(f"{label} must have a valid totalPrice")
        if not _is_text(data.get("category")):
            errors.append(f"{label} must have a valid category")
        _raise_if(errors, "Materials", data)

        return cls(
            id=data["id"],
            name=data["name"],
            quantity=int(data["quantity"]),
            unit_price=float(data["unitPrice"]),
            total_price=float(data["totalPrice"]),
            category=data["category"],
            description=data.get("description") or "",
            image_url=data.get("imageURL") or "",
            purchase_url=data.get("amazonURL") or "",
        )


@dataclass(frozen=True, slots=True)
class ProjectList:
    """The project list resource."""

    projects: tuple[ProjectSummary, ...] = ()
    has_more: bool = False

    @property
    def total(self) -> int:
        return len(self.projects)

    @classmethod
    def from_dict(cls, data: Any) -> ProjectList:
        """Parse a list payload, skipping invalid project entries."""
        data = _require_mapping(data, "Project list")
        raw = data.get("projects")
        if not isinstance(raw, list):
            raise ValidationError("Project list validation failed: projects must be an array")

        projects = []
        for item in raw:
            try:
                projects.append(ProjectSummary.from_dict(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid project entry: {e.message}")
        return cls(projects=tuple(projects), has_more=bool(data.get("hasMore", False)))


@dataclass(frozen=True, slots=True)
class ProjectDetail:
    """A project with its steps and materials bill."""

    project: ProjectSummary
    steps: tuple[Step, ...] = field(default_factory=tuple)
    materials: tuple[Material, ...] = field(default_factory=tuple)

    @property
    def total_price(self) -> float:
        return round(sum(material.total_price for material in self.materials), 2)

    @classmethod
    def from_dict(cls, data: Any) -> ProjectDetail:
        data = _require_mapping(data, "Project detail")
        steps = data.get("steps")
        materials = data.get("materials")
        if not isinstance(steps, list):
            raise ValidationError("Steps validation failed: Steps must be an array")
        if not isinstance(materials, list):
            raise ValidationError(
                "Materials validation failed: Materials must be an array"
            )
        return cls(
            project=ProjectSummary.from_dict(data.get("project")),
            steps=tuple(Step.from_dict(step, i) for i, step in enumerate(steps)),
            materials=tuple(
                Material.from_dict(material, i) for i, material in enumerate(materials)
            ),
        )


@dataclass(frozen=True, slots=True)
class ImageHandle:
    """A loaded binary image resource."""

    url: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)
