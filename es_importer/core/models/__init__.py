"""
Core data models for the CSV to Elasticsearch importer.

All models use Pydantic for runtime validation and type safety.
"""

from .bulk_batch import BulkBatch
from .import_result import ImportResult
from .upload_target import Credentials, UploadTarget

__all__ = [
    "UploadTarget",
    "Credentials",
    "BulkBatch",
    "ImportResult",
]
