"""
CSV to bulk batch processing module.
"""

from .pipeline import BulkImportPipeline, PipelineState
from .readers import CSVTokenizer, RecordStream
from .writers import BulkBatchAssembler, encode_document

__all__ = [
    "BulkImportPipeline",
    "PipelineState",
    "CSVTokenizer",
    "RecordStream",
    "BulkBatchAssembler",
    "encode_document",
]
