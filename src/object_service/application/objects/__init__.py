"""Application objects – document-store port, find options and write policy."""
from object_service.application.objects.csv_import import rows_from_csv
from object_service.application.objects.immutable import ImmutableCollections
from object_service.application.objects.options import FindOptions, SortDirection
from object_service.application.objects.ports import Document, ObjectRepository

__all__ = [
    "Document",
    "FindOptions",
    "ImmutableCollections",
    "ObjectRepository",
    "SortDirection",
    "rows_from_csv",
]
