"""
reportdash/render.py
Report list rendering: picks the error, empty or populated state and draws
one card per report.
"""

import enum
import html
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import streamlit as st

from reportdash.config import DEFAULT_DISPLAY_TIMEZONE, ConfigurationError, get_secret
from reportdash.reports import Report

ERROR_PREFIX  = "Error cargando reportes"
EMPTY_MESSAGE = "No hay reportes disponibles"

TIMESTAMP_FORMAT = "%d/%m/%Y, %H:%M:%S"

# ─── Colour constants ─────────────────────────────────────────────────────────

C_TITLE   = "#1F2937"
C_CONTENT = "#4B5563"
C_MUTED   = "#9CA3AF"
C_BORDER  = "#E5E7EB"


class ReportsState(enum.Enum):
    ERROR     = "error"
    EMPTY     = "empty"
    POPULATED = "populated"


def select_state(reports: list[Report], error: str | None) -> ReportsState:
    """Error wins over any data, then an empty list, then the cards."""
    if error is not None:
        return ReportsState.ERROR
    if not reports:
        return ReportsState.EMPTY
    return ReportsState.POPULATED


def _display_timezone() -> tzinfo:
    name = get_secret("DISPLAY_TIMEZONE", DEFAULT_DISPLAY_TIMEZONE) or DEFAULT_DISPLAY_TIMEZONE
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigurationError(f"Unknown DISPLAY_TIMEZONE: {name}") from None


def format_timestamp(value: datetime, tz: tzinfo | None = None) -> str:
    """Return a human-readable local time, e.g. '02/01/2024, 00:00:00'."""
    return value.astimezone(tz or _display_timezone()).strftime(TIMESTAMP_FORMAT)


def error_message(error: str) -> str:
    return f"{ERROR_PREFIX}: {error}"


def report_card_html(report: Report, tz: tzinfo | None = None) -> str:
    """Return the HTML for a single report card."""
    return (
        f"<div class='report-card' style='border:1px solid {C_BORDER};"
        f"border-radius:8px;padding:16px;margin-bottom:16px;'>"
        f"<h3 style='margin:0;font-size:1.1rem;font-weight:600;color:{C_TITLE};'>"
        f"{html.escape(report.title)}</h3>"
        f"<p style='margin:8px 0 0;color:{C_CONTENT};'>{html.escape(report.content)}</p>"
        f"<p style='margin:8px 0 0;color:{C_MUTED};font-size:0.85rem;'>"
        f"{format_timestamp(report.created_at, tz)}</p>"
        f"</div>"
    )


def render_reports(reports: list[Report], error: str | None) -> ReportsState:
    """
    Draw the report list for one fetch outcome and return the state shown.

    Nothing is remembered between calls; the state is recomputed from the
    two inputs every time.
    """
    state = select_state(reports, error)

    if state is ReportsState.ERROR:
        st.error(error_message(error))
    elif state is ReportsState.EMPTY:
        st.info(EMPTY_MESSAGE)
    else:
        tz = _display_timezone()
        for report in reports:
            st.markdown(report_card_html(report, tz), unsafe_allow_html=True)

    return state
