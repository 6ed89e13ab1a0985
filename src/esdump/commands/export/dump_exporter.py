"""
Index dump exporter.

Streams every document of each requested index into a sink as NDJSON
bulk records. Each index gets its own point-in-time snapshot and is paged
with ``search_after`` in ``_shard_doc`` order, one request at a time, so
memory stays bounded by one page.

Failure handling:
    - backend unreachable or output not writable: the run stops
      (``FatalExportError``)
    - backend refuses an index or answers with an error or an unreadable
      body: that index stops, what was already written stays, the next
      index starts
    - a page whose last document has no sort key: reported as a data
      anomaly and the index stops instead of restarting from the top
"""

import sys
from typing import Callable, Optional

import typer
from tqdm import tqdm

from esdump.constants import MALFORMED_RESPONSE_LIMIT
from esdump.errors import FatalExportError, SinkError
from esdump.logging import log_export_event
from esdump.utils.console import error, success, warning
from esdump.utils.export import (
    CursorTracker,
    PageFetcher,
    RecordEncoder,
    Sink,
    SnapshotSession,
    is_sort_anomaly,
    open_sink,
)
from esdump.utils.export.report import (
    ExportReport,
    IndexOutcome,
    IndexState,
    display_report,
)
from esdump.utils.export.results import (
    DATA_ANOMALY,
    MALFORMED,
    Fatal,
    IndexFailure,
    Page,
)
from esdump.utils.settings import ExportSettings
from esdump.utils.transport import SearchTransport
from ..shared.base_command import BaseCommand

STRICT_EXIT_CODE = 2


class DumpExporter(BaseCommand):
    """Export loop over a list of indices"""

    def __init__(
        self,
        settings: ExportSettings,
        config_store=None,
        progress_factory: Optional[Callable] = None,
    ):
        super().__init__(config_store)
        self.settings = settings
        self.progress_factory = progress_factory or tqdm
        self._malformed_streak = 0

    def get_item_type(self) -> str:
        return "documents"

    def export_data(self, **connection_options) -> ExportReport:
        """
        Resolve the connection, dump every index and print a summary.

        Args:
            connection_options: url, username, password, api_key, insecure,
                timeout, profile_name as accepted by ``initialize_connection``

        Raises:
            typer.Exit: 1 on a fatal error, 2 with ``strict`` when an index failed
        """
        connection = self.initialize_connection(**connection_options)
        self.logger.info(
            f"Starting dump of {', '.join(self.settings.indices)} from {connection.url}"
        )

        try:
            with self.create_transport(connection) as transport, \
                    open_sink(self.settings.output) as sink:
                report = self.run(transport, sink)
        except (FatalExportError, SinkError) as e:
            self.logger.error(f"Dump aborted: {e}")
            error(f"Dump aborted: {e}")
            raise typer.Exit(1)

        display_report(report)
        if report.failed_indices:
            warning(
                f"{len(report.failed_indices)} of {len(report.outcomes)} indices failed: "
                f"{', '.join(report.failed_indices)}"
            )
        success(
            f"Exported {report.documents_total} {self.get_item_type()} "
            f"from {len(report.outcomes) - len(report.failed_indices)} indices"
        )
        self.logger.info(
            f"Dump finished: {report.documents_total} documents, "
            f"failed indices: {report.failed_indices or 'none'}"
        )

        if self.settings.strict and not report.succeeded:
            raise typer.Exit(STRICT_EXIT_CODE)
        return report

    def run(self, transport: SearchTransport, sink: Sink) -> ExportReport:
        """
        Dump all configured indices, in order, into ``sink``.

        The sink is flushed after every page but not closed; its owner
        closes it.

        Raises:
            FatalExportError: The backend is unreachable, the output failed,
                or responses kept coming back unreadable
        """
        snapshots = SnapshotSession(transport)
        fetcher = PageFetcher(transport)
        report = ExportReport()
        self._malformed_streak = 0

        for index in self.settings.indices:
            report.outcomes.append(self._export_index(index, snapshots, fetcher, sink))

        report.bytes_written = sink.bytes_written
        return report

    def _export_index(
        self,
        index: str,
        snapshots: SnapshotSession,
        fetcher: PageFetcher,
        sink: Sink,
    ) -> IndexOutcome:
        settings = self.settings
        outcome = IndexOutcome(index=index)
        log_export_event("opening snapshot", level="debug", index=index)

        opened = snapshots.open(index, settings.keep_alive, settings.request_timeout)
        if isinstance(opened, Fatal):
            raise FatalExportError(opened.detail, index=index) from opened.cause
        if isinstance(opened, IndexFailure):
            self._fail_index(outcome, opened)
            return outcome

        token = opened.value
        outcome.state = IndexState.SNAPSHOT_OPENED
        cursor = CursorTracker()
        outcome.cursors = cursor.history

        progress = self.progress_factory(
            desc=index,
            unit=" docs",
            file=sys.stderr,
            disable=not settings.show_progress,
            leave=False,
        )
        try:
            outcome.state = IndexState.FETCHING
            while True:
                fetched = fetcher.fetch(
                    index,
                    token,
                    settings.keep_alive,
                    settings.batch_size,
                    cursor.mark_requested(),
                    request_timeout=settings.request_timeout,
                )
                if isinstance(fetched, Fatal):
                    raise FatalExportError(fetched.detail, index=index) from fetched.cause
                if isinstance(fetched, IndexFailure):
                    self._fail_index(outcome, fetched)
                    break

                self._malformed_streak = 0
                page: Page = fetched.value
                token = page.pit_id

                if page.is_empty:
                    outcome.state = IndexState.DONE
                    break

                self._write_page(page, index, sink)
                outcome.documents += len(page)
                outcome.pages += 1
                progress.update(len(page))

                if is_sort_anomaly(page):
                    self._fail_index(
                        outcome,
                        IndexFailure(
                            index=index,
                            detail=(
                                f"data anomaly: last document of page {outcome.pages} "
                                "has no sort value, cannot continue pagination"
                            ),
                            kind=DATA_ANOMALY,
                        ),
                    )
                    break
                cursor.advance(page)
        finally:
            progress.close()

        if settings.release_snapshots:
            snapshots.release(token, index=index, request_timeout=settings.request_timeout)

        if outcome.state is IndexState.DONE:
            log_export_event(
                "completed",
                index=index,
                details={"documents": outcome.documents, "pages": outcome.pages},
            )
        return outcome

    def _write_page(self, page: Page, index: str, sink: Sink) -> None:
        try:
            sink.write(RecordEncoder.encode_page(page.documents, index))
            sink.flush()
        except SinkError as e:
            raise FatalExportError(str(e), index=index) from e

    def _fail_index(self, outcome: IndexOutcome, failure: IndexFailure) -> None:
        outcome.state = IndexState.INDEX_FAILED
        outcome.failure = failure

        details = {"kind": failure.kind}
        if failure.status is not None:
            details["status"] = failure.status
        if failure.body:
            details["body"] = failure.body
        # below the stderr handler level; error() is the console copy
        log_export_event(failure.detail, level="info", index=outcome.index, details=details)
        error(f"Skipping {failure.describe()}")

        if failure.kind == MALFORMED:
            self._malformed_streak += 1
            if self._malformed_streak >= MALFORMED_RESPONSE_LIMIT:
                raise FatalExportError(
                    f"{self._malformed_streak} consecutive malformed responses, "
                    f"last from index '{outcome.index}'",
                    index=outcome.index,
                )
        else:
            self._malformed_streak = 0
