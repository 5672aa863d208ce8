"""
Bulk payload writers.
"""

from .bulk_writer import BulkBatchAssembler, render_bulk_payload
from .document_encoder import encode_document

__all__ = [
    "BulkBatchAssembler",
    "encode_document",
    "render_bulk_payload",
]
