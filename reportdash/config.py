"""
reportdash/config.py
Settings, routes and logging setup for the Reportes dashboard.
Secrets resolve from st.secrets first, then the environment (.env).
"""

import logging
import os

import streamlit as st
from dotenv import load_dotenv

load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing or has an unknown value."""


# ─── Routes ───────────────────────────────────────────────────────────────────

ENTRY_ROUTE     = "/"
DASHBOARD_ROUTE = "/dashboard"

# Script paths accepted by st.switch_page, relative to the main script.
ENTRY_PAGE     = "app.py"
DASHBOARD_PAGE = "pages/dashboard.py"

# ─── Defaults ─────────────────────────────────────────────────────────────────

DEFAULT_AUTH_BACKEND     = "streamlit"
DEFAULT_AUTH_PROVIDER    = "auth0"
DEFAULT_REPORTS_SOURCE   = "supabase"
DEFAULT_DISPLAY_TIMEZONE = "UTC"
DEFAULT_LOG_LEVEL        = "INFO"

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

_console_handler: logging.Handler | None = None


# ─── Secret resolution ────────────────────────────────────────────────────────

def get_secret(key: str, default: str | None = None) -> str | None:
    """
    Resolve a setting by name.

    Tries st.secrets first (Streamlit Cloud / .streamlit/secrets.toml), then
    falls back to os.environ (local development via .env loaded above), then
    to `default`.  A missing secrets.toml is treated the same as a missing key.
    """
    try:
        return st.secrets[key]
    except Exception:
        return os.environ.get(key, default)


def require_secret(key: str) -> str:
    """Return a setting that must be present, or raise ConfigurationError."""
    value = get_secret(key)
    if not value:
        raise ConfigurationError(f"Missing required setting: {key}")
    return value


# ─── Logging ──────────────────────────────────────────────────────────────────

def configure_logging(level: str | None = None) -> logging.Logger:
    """
    Attach a console handler to the package logger.

    Streamlit re-executes page scripts on every interaction, so the handler is
    only added the first time.  Level comes from LOG_LEVEL unless given.
    """
    global _console_handler

    logger = logging.getLogger("reportdash")
    level_name = (level or get_secret("LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if _console_handler not in logger.handlers:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_console_handler)

    return logger
