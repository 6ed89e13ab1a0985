"""
Per-index outcome of an export run and its summary table.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from rich.markup import escape

from esdump.utils.console import console, create_table
from .results import IndexFailure


class IndexState(Enum):
    IDLE = "idle"
    SNAPSHOT_OPENED = "snapshot_opened"
    FETCHING = "fetching"
    DONE = "done"
    INDEX_FAILED = "index_failed"


@dataclass
class IndexOutcome:
    index: str
    state: IndexState = IndexState.IDLE
    documents: int = 0
    pages: int = 0
    failure: Optional[IndexFailure] = None
    cursors: List[Optional[Any]] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.state is IndexState.INDEX_FAILED


@dataclass
class ExportReport:
    outcomes: List[IndexOutcome] = field(default_factory=list)
    bytes_written: int = 0

    @property
    def documents_total(self) -> int:
        return sum(outcome.documents for outcome in self.outcomes)

    @property
    def failed_indices(self) -> List[str]:
        return [outcome.index for outcome in self.outcomes if outcome.failed]

    @property
    def succeeded(self) -> bool:
        return not self.failed_indices


def display_report(report: ExportReport) -> None:
    table = create_table("Export summary", ["Index", "Status", "Documents", "Pages", "Detail"])
    for outcome in report.outcomes:
        if outcome.failed:
            status = "[red]failed[/red]"
            detail = outcome.failure.detail if outcome.failure else ""
        else:
            status = "[green]done[/green]"
            detail = ""
        table.add_row(
            escape(outcome.index), status, str(outcome.documents),
            str(outcome.pages), escape(detail)
        )
    console.print(table)
