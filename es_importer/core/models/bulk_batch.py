"""
BulkBatch model representing one serialized bulk payload (ephemeral).
"""

from pydantic import BaseModel, Field


class BulkBatch(BaseModel):
    """
    A window of documents rendered in the _bulk wire format.

    Note: BulkBatch is built, sent and discarded; it is never retried or persisted.

    Attributes:
        sequence: 1-based batch number within the run
        document_count: Number of documents (action/document pairs) in the payload
        payload: Newline-delimited action and document lines with a trailing newline
    """

    sequence: int = Field(..., ge=1)
    document_count: int = Field(..., ge=1)
    payload: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "sequence": 1,
                "document_count": 1,
                "payload": '{"index":{"_index":"people"}}\n{"id":1,"name":"Alice"}\n'
            }
        }

    @property
    def line_count(self) -> int:
        return self.payload.count("\n")

    @property
    def byte_length(self) -> int:
        return len(self.payload.encode("utf-8"))
