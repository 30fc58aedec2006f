"""Per-object ingest state machine and a thread-pool driver over many objects.

One object moves through::

    OPENING -> DETECTING_ENCRYPTION -> READING_HEADER -> READING_BODY
        -> BATCH_FULL -> READING_BODY ... -> EOF -> CLOSED

and lands in FAILED from any state on an unreadable, undecryptable or
schema-invalid object. Nothing is retried here.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from scrubline.core.config import AppSettings
from scrubline.core.exceptions import IngestCancelled, ObjectError, SchemaError
from scrubline.core.protocols import IInspectionClient, IKeyProvider, IObjectStore, ISchemaSink
from scrubline.ingest.batcher import TableBatcher
from scrubline.ingest.headers import parse_header_line
from scrubline.ingest.reader import open_reader
from scrubline.ingest.schema import build_schema
from scrubline.models.source import DecryptionContext, IngestReport, ObjectRef, ObjectState
from scrubline.models.table import Table

logger = logging.getLogger(__name__)


class ObjectProcessor:
    """Reads one object at a time and submits its rows as bounded tables.

    Holds no per-object state between calls, so one instance can serve
    every worker of a pool.
    """

    def __init__(
        self,
        *,
        store: IObjectStore,
        inspection: IInspectionClient,
        settings: AppSettings,
        schema_sink: ISchemaSink | None = None,
        key_provider: IKeyProvider | None = None,
        decryption: DecryptionContext | None = None,
    ) -> None:
        self._store = store
        self._inspection = inspection
        self._schema_sink = schema_sink
        self._key_provider = key_provider
        self._settings = settings
        self._decryption = decryption if decryption is not None else settings.encryption.context()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def process(self, ref: ObjectRef, cancel: threading.Event | None = None) -> IngestReport:
        """Process ``ref`` to completion and report the outcome.

        Per-object errors are logged and reported as FAILED. Cancellation
        discards the pending batch and re-raises ``IngestCancelled`` carrying
        the partial report.
        """
        report = IngestReport(ref=ref)
        try:
            self._run(ref, report, cancel)
        except IngestCancelled:
            report.state = ObjectState.FAILED
            report.error = "cancelled"
            logger.info("Cancelled %s after %d lines", ref, report.lines_read)
            raise
        except ObjectError as exc:
            report.error = str(exc)
            logger.error("Failed %s in state %s: %s", ref, report.state, exc)
            report.state = ObjectState.FAILED
        return report

    def _transition(self, report: IngestReport, state: ObjectState) -> None:
        logger.debug("%s: %s -> %s", report.ref, report.state, state)
        report.state = state

    def _run(self, ref: ObjectRef, report: IngestReport, cancel: threading.Event | None) -> None:
        stream = self._store.open(ref.key)

        self._transition(report, ObjectState.DETECTING_ENCRYPTION)
        report.encrypted = self._decryption.encrypted
        reader = open_reader(
            report.encrypted, ref.key, ref.bucket, stream,
            self._decryption.key_name, self._key_provider,
        )
        with reader:
            self._transition(report, ObjectState.READING_HEADER)
            header_line = reader.readline()
            if header_line is None:
                raise SchemaError(ref.bucket, ref.key, "object is empty, no header line")
            report.headers = parse_header_line(header_line, bucket=ref.bucket, object_name=ref.key)
            if self._schema_sink is not None:
                self._schema_sink.create_table(ref, build_schema(report.headers))

            inspection = self._settings.inspection
            batcher = TableBatcher(
                report.headers,
                batch_size=inspection.batch_size,
                max_batch_bytes=inspection.max_batch_bytes,
                policy=inspection.row_mismatch_policy,
            )
            self._transition(report, ObjectState.READING_BODY)
            for line in reader:
                if cancel is not None and cancel.is_set():
                    dropped = batcher.discard()
                    logger.debug("%s: discarded %d pending rows", ref, dropped)
                    raise IngestCancelled(f"{ref} cancelled", report)
                report.lines_read += 1
                table = batcher.add_line(line)
                if table is not None:
                    self._transition(report, ObjectState.BATCH_FULL)
                    self._submit(ref, table, report)
                    self._transition(report, ObjectState.READING_BODY)

            self._transition(report, ObjectState.EOF)
            tail = batcher.flush()
            if tail is not None:
                self._submit(ref, tail, report)
            report.rows_rejected = batcher.rows_rejected

        self._transition(report, ObjectState.CLOSED)
        logger.info(
            "Ingested %s: %d lines, %d rows in %d tables, %d rejected",
            ref, report.lines_read, report.rows_emitted,
            report.tables_submitted, report.rows_rejected,
        )

    def _submit(self, ref: ObjectRef, table: Table, report: IngestReport) -> None:
        self._inspection.submit(ref, table)
        report.tables_submitted += 1
        report.rows_emitted += table.row_count


def ingest_objects(
    processor: ObjectProcessor,
    refs: Iterable[ObjectRef],
    *,
    max_workers: int | None = None,
    cancel: threading.Event | None = None,
) -> list[IngestReport]:
    """Process objects independently on a thread pool.

    Reports come back in the order of ``refs``. A failed object never stops
    its siblings, whatever it raised; a cancelled one is reported as FAILED
    with the progress it made. ``max_workers`` defaults to the processor's
    ``settings.max_workers``.
    """
    refs = list(refs)
    if max_workers is None:
        max_workers = processor.settings.max_workers

    def _one(ref: ObjectRef) -> IngestReport:
        try:
            return processor.process(ref, cancel)
        except IngestCancelled as exc:
            if exc.report is not None:
                return exc.report
            return IngestReport(ref=ref, state=ObjectState.FAILED, error="cancelled")
        except Exception as exc:
            logger.exception("Unexpected error while ingesting %s", ref)
            return IngestReport(
                ref=ref, state=ObjectState.FAILED, error=f"{type(exc).__name__}: {exc}",
            )

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(_one, refs))


def ingest_bucket(
    store: IObjectStore,
    processor: ObjectProcessor,
    settings: AppSettings,
    *,
    cancel: threading.Event | None = None,
) -> list[IngestReport]:
    """List every object under ``settings.s3.prefix`` and ingest them all."""
    bucket = settings.s3.bucket
    keys = store.list_objects(settings.s3.prefix)
    logger.info("Found %d objects under s3://%s/%s", len(keys), bucket, settings.s3.prefix)
    refs = [ObjectRef(bucket=bucket, key=key) for key in keys]
    return ingest_objects(processor, refs, max_workers=settings.max_workers, cancel=cancel)
