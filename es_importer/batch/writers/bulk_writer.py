"""
Bulk batch assembler for the Elasticsearch _bulk NDJSON format.

Each document becomes two lines, an action line naming the index and the
document itself. Documents are grouped into windows of batch_size; every
window but the last is full.
"""

from typing import Iterable, Iterator

from es_importer.core.models import BulkBatch
from es_importer.utils.validation import validate_batch_size


def render_bulk_payload(lines: list[str]) -> str:
    """Join NDJSON lines with a single trailing newline."""
    return "\n".join(lines) + "\n"


class BulkBatchAssembler:
    """
    Accumulates encoded documents and emits full bulk payloads.
    """

    def __init__(self, index_name: str, batch_size: int):
        """
        Initialize assembler.

        Args:
            index_name: Target index; interpolated without escaping, so it
                must already have passed validate_index_name()
            batch_size: Documents per payload
        """
        self.index_name = index_name
        self.batch_size = validate_batch_size(batch_size)
        self.action_line = f'{{"index":{{"_index":"{index_name}"}}}}'
        self._lines: list[str] = []
        self._pending = 0
        self._sequence = 0

    @property
    def pending_documents(self) -> int:
        return self._pending

    def add(self, document: str) -> BulkBatch | None:
        """
        Append one document.

        Args:
            document: Encoded JSON object

        Returns:
            A full BulkBatch once batch_size documents are pending, else None
        """
        self._lines.append(self.action_line)
        self._lines.append(document)
        self._pending += 1

        if self._pending >= self.batch_size:
            return self._emit()
        return None

    def flush(self) -> BulkBatch | None:
        """Emit the pending partial batch, or None if nothing is pending."""
        if not self._pending:
            return None
        return self._emit()

    def assemble(self, documents: Iterable[str]) -> Iterator[BulkBatch]:
        """Yield every batch for a document sequence, partial last batch included."""
        for document in documents:
            batch = self.add(document)
            if batch is not None:
                yield batch

        batch = self.flush()
        if batch is not None:
            yield batch

    def _emit(self) -> BulkBatch:
        self._sequence += 1
        batch = BulkBatch(
            sequence=self._sequence,
            document_count=self._pending,
            payload=render_bulk_payload(self._lines),
        )
        self._lines = []
        self._pending = 0
        return batch
