"""
reportdash/reports.py
Report records and the single read that loads them.

Entry point:
  fetch_reports(source=None) -> FetchResult
    Reads every row of the reports table, newest first.  Never raises:
    failures come back as FetchResult.error so the page can still render.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

import pandas as pd

from reportdash.config import DEFAULT_REPORTS_SOURCE, ConfigurationError, get_secret
from reportdash.db import get_supabase_client, query_df

logger = logging.getLogger(__name__)

REPORTS_TABLE = "reports"

_REPORTS_SQL = """
    SELECT  id,
            title,
            content,
            created_at
    FROM    reports
    ORDER BY created_at DESC
"""


# ─── Records ──────────────────────────────────────────────────────────────────

def _parse_timestamp(value: Any) -> datetime:
    """
    Coerce an ISO string, datetime or pandas Timestamp to an aware UTC datetime.

    Naive values are taken as UTC.  Anything pandas cannot read raises
    ValueError so the fetcher reports it instead of rendering a bad card.
    """
    if not isinstance(value, (str, datetime)):
        raise ValueError(f"Unsupported created_at value: {value!r}")
    ts = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(ts):
        raise ValueError(f"Unparseable created_at value: {value!r}")
    return ts.to_pydatetime()


@dataclass(frozen=True)
class Report:
    id: Any
    title: str
    content: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Report":
        """Build a Report from a row returned by either source."""
        return cls(
            id=row["id"],
            title=row.get("title") or "",
            content=row.get("content") or "",
            created_at=_parse_timestamp(row["created_at"]),
        )


@dataclass
class FetchResult:
    reports: list[Report] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ─── Sources ──────────────────────────────────────────────────────────────────

def _rows_from_supabase() -> list[dict]:
    response = (
        get_supabase_client()
        .table(REPORTS_TABLE)
        .select("*")
        .order("created_at", desc=True)
        .execute()
    )
    return response.data or []


def _rows_from_postgres() -> list[dict]:
    df = query_df(_REPORTS_SQL)
    if df.empty:
        return []
    return df.to_dict("records")


_SOURCES = {
    "supabase": _rows_from_supabase,
    "postgres": _rows_from_postgres,
}


def _error_message(exc: Exception) -> str:
    # PostgREST APIError carries the server's message on .message
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or type(exc).__name__


def _warn_on_duplicate_ids(reports: list[Report]) -> None:
    seen = set()
    for report in reports:
        if report.id in seen:
            logger.warning("Duplicate report id %r in %s", report.id, REPORTS_TABLE)
        seen.add(report.id)


# ─── Fetcher ──────────────────────────────────────────────────────────────────

def fetch_reports(source: str | None = None) -> FetchResult:
    """
    Read all reports, newest first, from the configured source.

    `source` is 'supabase' (REST, the default) or 'postgres' (direct
    psycopg2 connection); when omitted it comes from REPORTS_SOURCE.
    Exactly one query is issued.  Any failure is logged and returned as
    FetchResult(reports=[], error=<message>) instead of being raised.
    """
    try:
        name = (source or get_secret("REPORTS_SOURCE", DEFAULT_REPORTS_SOURCE) or DEFAULT_REPORTS_SOURCE).lower()
        if name not in _SOURCES:
            raise ConfigurationError(f"Unknown REPORTS_SOURCE: {name}")
        rows = _SOURCES[name]()
        reports = [Report.from_row(row) for row in rows]
    except Exception as exc:
        logger.exception("Error fetching reports")
        return FetchResult(reports=[], error=_error_message(exc))

    _warn_on_duplicate_ids(reports)
    logger.info("Fetched %d reports", len(reports))
    return FetchResult(reports=reports)
