# File: sitemap_checker/report/summary.py
"""sitemap_checker.report.summary: counts of comparison records per outcome."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable

from sitemap_checker.models import ComparisonRecord, Outcome


@dataclass(slots=True)
class StatusSummary:
    """How many pages ended in each outcome."""

    total: int = 0
    present: int = 0
    present_different_content: int = 0
    redirected_once: int = 0
    redirected_chain: int = 0
    missing: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


_FIELDS = {
    Outcome.PRESENT: "present",
    Outcome.PRESENT_DIFFERENT_CONTENT: "present_different_content",
    Outcome.REDIRECTED_ONCE: "redirected_once",
    Outcome.REDIRECTED_CHAIN: "redirected_chain",
    Outcome.MISSING: "missing",
}


def summarize(records: Iterable[ComparisonRecord]) -> StatusSummary:
    """Tally *records* by outcome."""
    summary = StatusSummary()
    for record in records:
        summary.total += 1
        name = _FIELDS[record.outcome]
        setattr(summary, name, getattr(summary, name) + 1)
    return summary


__all__ = ["StatusSummary", "summarize"]
