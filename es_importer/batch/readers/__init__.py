"""
CSV source readers.
"""

from .csv_tokenizer import CSVTokenizer, read_csv_text, tokenize
from .record_stream import RecordStream

__all__ = [
    "CSVTokenizer",
    "RecordStream",
    "read_csv_text",
    "tokenize",
]
