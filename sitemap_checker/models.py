# sitemap_checker/models.py
"""
Data models shared by the checker, the cache and the progress channel.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

IDENTICAL = "Identical"
DIFFERENT = "Different"

# target_relative_path markers for records without a target page
MISSING_PATH = "Missing"
ERROR_PATH = "Error"
# source_relative_path marker for pages that only exist on the target site
NEW_PATH = "NEW"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dt_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _dt_from_str(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class Outcome(str, Enum):
    """How a source page relates to its counterpart on the target site."""

    PRESENT = "Present"
    PRESENT_DIFFERENT_CONTENT = "PresentDifferentContent"
    REDIRECTED_ONCE = "RedirectedOnce"
    REDIRECTED_CHAIN = "RedirectedChain"
    MISSING = "Missing"


@dataclass(frozen=True, slots=True)
class CandidatePage:
    """A page listed by a sitemap."""

    url: str
    last_modified: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class PageMetadata:
    """Title metadata of one fetched page; empty strings when absent."""

    title: str = ""
    og_title: str = ""


@dataclass(frozen=True, slots=True)
class ComparisonRecord:
    """Result of comparing one source page with the target site."""

    source_relative_path: str
    source_url: str
    target_relative_path: str
    target_url: str
    outcome: Outcome
    source_title: str = ""
    target_title: str = ""
    source_og_title: str = ""
    target_og_title: str = ""
    title_comparison: str = ""
    og_title_comparison: str = ""
    last_modified: Optional[datetime] = None
    checked_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceRelativePath": self.source_relative_path,
            "sourceUrl": self.source_url,
            "targetRelativePath": self.target_relative_path,
            "targetUrl": self.target_url,
            "outcome": self.outcome.value,
            "sourceTitle": self.source_title,
            "targetTitle": self.target_title,
            "sourceOgTitle": self.source_og_title,
            "targetOgTitle": self.target_og_title,
            "titleComparison": self.title_comparison,
            "ogTitleComparison": self.og_title_comparison,
            "lastModified": _dt_to_str(self.last_modified),
            "checkedAt": _dt_to_str(self.checked_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ComparisonRecord:
        checked_at = _dt_from_str(data.get("checkedAt"))
        return cls(
            source_relative_path=data["sourceRelativePath"],
            source_url=data["sourceUrl"],
            target_relative_path=data.get("targetRelativePath", ""),
            target_url=data.get("targetUrl", ""),
            outcome=Outcome(data["outcome"]),
            source_title=data.get("sourceTitle", ""),
            target_title=data.get("targetTitle", ""),
            source_og_title=data.get("sourceOgTitle", ""),
            target_og_title=data.get("targetOgTitle", ""),
            title_comparison=data.get("titleComparison", ""),
            og_title_comparison=data.get("ogTitleComparison", ""),
            last_modified=_dt_from_str(data.get("lastModified")),
            checked_at=checked_at if checked_at is not None else utcnow(),
        )


@dataclass(slots=True)
class ResultSet:
    """The persisted result list together with the moment it was saved."""

    cached_at: datetime
    results: List[ComparisonRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cachedAt": _dt_to_str(self.cached_at),
            "results": [r.to_dict() for r in self.results],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ResultSet:
        if not isinstance(data, dict) or "cachedAt" not in data:
            raise ValueError("cached result set must be a mapping with 'cachedAt'")
        return cls(
            cached_at=datetime.fromisoformat(data["cachedAt"]),
            results=[ComparisonRecord.from_dict(r) for r in data.get("results", [])],
        )


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """One progress notification; ``total_pages == -1`` while still unknown."""

    total_pages: int
    processed_pages: int
    current_result: Optional[ComparisonRecord] = None
    is_complete: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPages": self.total_pages,
            "processedPages": self.processed_pages,
            "currentResult": self.current_result.to_dict() if self.current_result else None,
            "isComplete": self.is_complete,
        }


@dataclass(frozen=True, slots=True)
class ErrorEvent:
    """Terminal signal sent instead of a progress event when a run fails."""

    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error}


RunEvent = Union[ProgressEvent, ErrorEvent]


__all__ = [
    "IDENTICAL",
    "DIFFERENT",
    "MISSING_PATH",
    "ERROR_PATH",
    "NEW_PATH",
    "Outcome",
    "CandidatePage",
    "PageMetadata",
    "ComparisonRecord",
    "ResultSet",
    "ProgressEvent",
    "ErrorEvent",
    "RunEvent",
    "utcnow",
]
