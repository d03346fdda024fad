"""Abstract base class for CI host providers."""

import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from a3_analysis_action.models.result import RunOutcome

log = logging.getLogger(__name__)


def text_link(target: str, text: str) -> str:
    """Render *text* followed by its link *target*, for logs without hyperlinks."""
    return f"{text} ({target})"


@dataclass(frozen=True, kw_only=True)
class CIProvider(ABC):
    """Adapter between an analysis run and the CI system hosting it.

    Providers tell the run where its workspace is and how the current job is
    identified, and decorate the console output with whatever the CI system
    understands (collapsible groups, error annotations, job summaries).
    """

    stream: TextIO = field(default_factory=lambda: sys.stdout, repr=False)

    @property
    @abstractmethod
    def workspace(self) -> Path:
        """Checked-out workspace of the current job."""

    @property
    @abstractmethod
    def run_id(self) -> str:
        """Identifier unique to the current job run on this host."""

    def emit(self, line: str) -> None:
        """Write one raw line to the CI console."""
        print(line, file=self.stream, flush=True)

    def format_link(self, target: str, text: str) -> str:
        """Render *text* as a terminal hyperlink (OSC 8) to *target*."""
        return f"\x1b]8;;{target}\x1b\\{text}\x1b]8;;\x1b\\"

    def annotate_error(self, message: str) -> None:
        """Surface *message* as a job-level error."""
        log.error("%s", message)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        """Fold the output produced inside the block under *title*."""
        log.info("%s", title)
        yield

    def publish_outcome(self, outcome: "RunOutcome") -> None:  # noqa: B027
        """Hand the final outcome to the CI system, if it has a place for it."""
