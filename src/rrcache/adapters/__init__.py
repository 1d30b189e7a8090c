"""Collaborator adapters for rrcache call sites."""

from rrcache.adapters.base import BinaryLoader, RecordStore, UrlResolver
from rrcache.adapters.demo import DemoRecordStore
from rrcache.adapters.http import HttpBinaryLoader, HttpRecordStore

__all__ = [
    "BinaryLoader",
    "DemoRecordStore",
    "HttpBinaryLoader",
    "HttpRecordStore",
    "RecordStore",
    "UrlResolver",
]
