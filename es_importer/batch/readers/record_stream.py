"""
Record stream pairing the CSV header with each data record.
"""

from typing import Iterator

from .csv_tokenizer import CSVTokenizer

Field = tuple[str, str]


class RecordStream:
    """
    Yields each data record as an ordered list of (header, value) pairs.

    The first record is the header. Values are stripped of surrounding
    whitespace and joined with the header by position: missing trailing
    columns become "", extra columns are dropped. A blank line is a record
    with one empty field and pairs like any short record.
    """

    def __init__(self, tokenizer: CSVTokenizer):
        """
        Initialize record stream.

        Args:
            tokenizer: Tokenizer positioned at the header row
        """
        self.tokenizer = tokenizer
        self._headers: list[str] = tokenizer.next_record() or []
        self.rows_read = 0

    @classmethod
    def from_text(cls, text: str) -> "RecordStream":
        return cls(CSVTokenizer(text))

    @property
    def headers(self) -> list[str]:
        return list(self._headers)

    def __iter__(self) -> Iterator[list[Field]]:
        while True:
            record = self.tokenizer.next_record()
            if not record:
                return
            self.rows_read += 1
            yield self.pair(record)

    def pair(self, record: list[str]) -> list[Field]:
        """Join one record with the header by position."""
        return [
            (name, record[i].strip() if i < len(record) else "")
            for i, name in enumerate(self._headers)
        ]
