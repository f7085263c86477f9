"""Fold per-document statistics into run-level totals.

Validators and the orchestrator never touch shared counters; they return
:class:`~specgate.models.RunStatistics` values. :class:`RunAggregator` is the
single place those values are added up for one invocation. Folding happens
under a lock so a traversal that validates documents concurrently would still
produce correct totals.
"""

from __future__ import annotations

import threading

from specgate.models import DocumentReport, RunReport, RunStatistics


class RunAggregator:
    """Accumulates document reports and their statistics for one run."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._statistics = RunStatistics()
        self._documents: list[DocumentReport] = []

    def record(self, report: DocumentReport) -> None:
        """Add a document's report and statistics to the run."""
        with self._lock:
            self._documents.append(report)
            self._statistics = self._statistics + report.statistics

    def add(self, statistics: RunStatistics) -> None:
        """Add counters that do not belong to a validated document (e.g. unreadable files)."""
        with self._lock:
            self._statistics = self._statistics + statistics

    @property
    def statistics(self) -> RunStatistics:
        with self._lock:
            return self._statistics.model_copy()

    def snapshot(self) -> RunReport:
        """Return the run so far as an independent :class:`~specgate.models.RunReport`."""
        with self._lock:
            return RunReport(
                documents=list(self._documents),
                statistics=self._statistics.model_copy(),
            )

    @property
    def has_failures(self) -> bool:
        stats = self.statistics
        return stats.failed > 0 or stats.malformed > 0
