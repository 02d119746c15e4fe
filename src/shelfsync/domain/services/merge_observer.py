"""Observers notified by the merge engine.

The merge engine recovers from unreadable records instead of failing the
whole cycle. Those recoveries are reported to an observer passed in by the
caller, so the engine itself never reaches for a global logger.
"""

from dataclasses import dataclass, field
from typing import Protocol

from shelfsync.core.logging import get_logger
from shelfsync.domain.entities.errors import RecordParseError

logger = get_logger(__name__)


@dataclass
class MergeStats:
    """Counters describing one merge.

    Attributes:
        existing_records: Pairs in the catalog before the merge.
        cleared_records: ``user-collections.*`` records whose ``added`` list was reset.
        synthesized_records: Records written from the membership snapshot.
        new_records: Synthesized records whose key was not in the catalog before.
        skipped_records: Records left untouched because their value did not parse.
    """

    existing_records: int = 0
    cleared_records: int = 0
    synthesized_records: int = 0
    new_records: int = 0
    skipped_records: int = 0


class MergeObserver(Protocol):
    """Receives events from ``CollectionMergeService``."""

    def record_parse_failed(self, error: RecordParseError) -> None: ...

    def merge_completed(self, stats: MergeStats) -> None: ...


class LoggingMergeObserver:
    """Observer that forwards merge events to structlog."""

    def record_parse_failed(self, error: RecordParseError) -> None:
        logger.warning(
            "Skipping collection record with unreadable value",
            key=error.key,
            error=error.message,
        )

    def merge_completed(self, stats: MergeStats) -> None:
        logger.info(
            "Merged collections",
            existing_records=stats.existing_records,
            cleared_records=stats.cleared_records,
            synthesized_records=stats.synthesized_records,
            new_records=stats.new_records,
            skipped_records=stats.skipped_records,
        )


@dataclass
class CollectingMergeObserver:
    """Observer that keeps every event in memory.

    Optionally forwards to another observer, so a caller can both inspect
    failures and keep them in the log.
    """

    forward_to: MergeObserver | None = None
    parse_failures: list[RecordParseError] = field(default_factory=list)
    stats: MergeStats | None = None

    def record_parse_failed(self, error: RecordParseError) -> None:
        self.parse_failures.append(error)
        if self.forward_to is not None:
            self.forward_to.record_parse_failed(error)

    def merge_completed(self, stats: MergeStats) -> None:
        self.stats = stats
        if self.forward_to is not None:
            self.forward_to.merge_completed(stats)
