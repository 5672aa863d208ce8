"""
ImportResult model summarizing a completed run.
"""

from pydantic import BaseModel, Field


class ImportResult(BaseModel):
    """
    Totals reported when a run reaches the DONE state.

    Attributes:
        index_name: Target index
        total_documents: Documents included in dispatched payloads, including
            payloads the cluster partially rejected
        batches_sent: Bulk requests sent
        rejected_batches: Responses that reported item errors
        duration_seconds: Wall time of the run
    """

    index_name: str
    total_documents: int = Field(0, ge=0)
    batches_sent: int = Field(0, ge=0)
    rejected_batches: int = Field(0, ge=0)
    duration_seconds: float = Field(0.0, ge=0.0)

    class Config:
        json_schema_extra = {
            "example": {
                "index_name": "people",
                "total_documents": 2,
                "batches_sent": 1,
                "rejected_batches": 0,
                "duration_seconds": 0.042
            }
        }

    def summary(self) -> str:
        return f"Successfully uploaded {self.total_documents} documents to index: {self.index_name}"
