"""
Bulk import pipeline orchestration.

Coordinates the flow: probe → read → encode → batch → upload
"""

import time
from enum import Enum
from pathlib import Path

from es_importer.batch.readers import CSVTokenizer, RecordStream, read_csv_text
from es_importer.batch.writers import BulkBatchAssembler, encode_document
from es_importer.core.errors import (
    ConnectivityError,
    ImporterError,
    InputNotFoundError,
    TransportError,
)
from es_importer.core.models import BulkBatch, ImportResult
from es_importer.observability.logger import get_logger, log_operation
from es_importer.observability.metrics import (
    bulk_request_duration_seconds,
    increment_counter,
    probe_failures_total,
    record_bulk_request,
    track_duration,
)
from es_importer.transport import BulkResponse, HttpTransport
from es_importer.utils.validation import validate_index_name


logger = get_logger(__name__)


class PipelineState(str, Enum):
    """Lifecycle of a single import run."""

    PROBING = "probing"
    STREAMING = "streaming"
    FLUSHING = "flushing"
    DONE = "done"
    FAILED = "failed"


class BulkImportPipeline:
    """
    Orchestrates a one-shot CSV to Elasticsearch import.

    Flow:
    1. Check the CSV file exists
    2. Probe the cluster (PROBING)
    3. Stream records, encode documents, post every full batch (STREAMING)
    4. Post the partial last batch (FLUSHING)
    5. Report totals (DONE)

    Any importer error (missing or unreadable input, failed probe, transport
    failure) moves the run to FAILED and propagates. Bulk
    responses reporting item errors are logged and the run continues.
    Uploads are sequential: the next batch is built only after the previous
    request has been fully answered.
    """

    def __init__(
        self,
        transport: HttpTransport,
        index_name: str,
        batch_size: int = 1000,
    ):
        """
        Initialize pipeline.

        Args:
            transport: Transport bound to the target cluster
            index_name: Target index
            batch_size: Documents per bulk request
        """
        self.transport = transport
        self.index_name = validate_index_name(index_name)
        self.assembler = BulkBatchAssembler(self.index_name, batch_size)
        self.state: PipelineState | None = None

        self.total_documents = 0
        self.batches_sent = 0
        self.rejected_batches = 0

    def run(self, csv_path: str | Path) -> ImportResult:
        """
        Run the import end to end.

        Args:
            csv_path: Path to the CSV file

        Returns:
            ImportResult with the totals of the run

        Raises:
            InputNotFoundError: CSV file is missing (before any network activity)
            ConnectivityError: Liveness probe failed
            TransportError: A bulk request failed on the wire
            InputReadError: CSV file cannot be read or decoded
        """
        started = time.monotonic()
        try:
            if not Path(csv_path).is_file():
                raise InputNotFoundError(str(csv_path))

            self._probe()

            self.state = PipelineState.STREAMING
            logger.info(f"Reading CSV file: {csv_path}")
            stream = RecordStream(CSVTokenizer(read_csv_text(csv_path)))
            logger.info(f"Header has {len(stream.headers)} columns")

            for row in stream:
                batch = self.assembler.add(encode_document(row))
                if batch is not None:
                    self._send(batch)

            self.state = PipelineState.FLUSHING
            batch = self.assembler.flush()
            if batch is not None:
                self._send(batch)
        except ImporterError:
            self.state = PipelineState.FAILED
            raise

        self.state = PipelineState.DONE
        result = ImportResult(
            index_name=self.index_name,
            total_documents=self.total_documents,
            batches_sent=self.batches_sent,
            rejected_batches=self.rejected_batches,
            duration_seconds=round(time.monotonic() - started, 3),
        )
        logger.info(
            f"Import complete: {result.total_documents} documents in {result.batches_sent} batches",
            extra={"rejected_batches": result.rejected_batches},
        )
        return result

    def _probe(self) -> None:
        self.state = PipelineState.PROBING
        target = self.transport.target
        logger.info(f"Probing cluster at {target.url}")
        if not self.transport.ping():
            increment_counter(probe_failures_total, 1, host=target.host)
            raise ConnectivityError(target.url)

    def _send(self, batch: BulkBatch) -> BulkResponse:
        """
        Post one batch and inspect the answer.

        Args:
            batch: Batch to upload

        Returns:
            Parsed response
        """
        path = self.transport.target.bulk_path
        try:
            with log_operation(
                "Sending bulk batch",
                logger=logger,
                batch=batch.sequence,
                documents=batch.document_count,
            ):
                with track_duration(bulk_request_duration_seconds, index=self.index_name):
                    raw = self.transport.post_bulk(path, batch.payload)
        except TransportError:
            record_bulk_request(self.index_name, batch.document_count, "failure")
            raise

        response = BulkResponse.parse(raw)
        if response.has_errors:
            self.rejected_batches += 1
            record_bulk_request(self.index_name, batch.document_count, "rejected")
            logger.warning(
                "Bulk errors detected",
                extra={
                    "batch": batch.sequence,
                    "status_code": response.status_code,
                    "item_errors": response.item_error_count,
                },
            )
        else:
            record_bulk_request(self.index_name, batch.document_count, "success")

        # Partially rejected payloads still count as dispatched
        self.total_documents += batch.document_count
        self.batches_sent += 1
        return response
