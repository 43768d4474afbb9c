"""
reportdash/db.py
Connection helpers for the hosted reports database.
All database access goes through this module.

Only the anon key is used.  The dashboard is read-only, so there is no
service-role client and no write helper here.
"""

import pandas as pd
import psycopg2
from psycopg2.extras import RealDictCursor
from supabase import create_client, Client

from reportdash.config import get_secret, require_secret


# ─── Supabase client (REST access to the reports table) ──────────────────────

def get_supabase_client() -> Client:
    """
    Return a Supabase client authenticated with the anon key.

    Intentionally not cached: every page load builds its own client so that
    nothing is shared between Streamlit reruns or users.  Raises
    ConfigurationError when SUPABASE_URL or SUPABASE_ANON_KEY is missing.
    """
    url = require_secret("SUPABASE_URL")
    key = require_secret("SUPABASE_ANON_KEY")
    return create_client(url, key)


# ─── Direct psycopg2 connection ───────────────────────────────────────────────

CONNECT_TIMEOUT  = 15
APPLICATION_NAME = "reportdash"


def get_pg_connection():
    """
    Open a read-only connection for the "postgres" reports source.

    Used when REPORTS_SOURCE is set to read the reports table straight from
    the database instead of through the REST API.  DB_HOST and DB_USER are
    required; port and database default to the Supabase values.  The session
    is marked read-only, so nothing issued over it can modify reports.
    """
    conn = psycopg2.connect(
        host=require_secret("DB_HOST"),
        port=get_secret("DB_PORT", "5432"),
        dbname=get_secret("DB_NAME", "postgres"),
        user=require_secret("DB_USER"),
        password=get_secret("DB_PASSWORD"),
        sslmode="require",
        connect_timeout=CONNECT_TIMEOUT,
        application_name=APPLICATION_NAME,
    )
    conn.set_session(readonly=True)
    return conn


# ─── Query helper ─────────────────────────────────────────────────────────────

def query_df(sql: str, params: tuple = ()) -> pd.DataFrame:
    """
    Run one SELECT over a fresh read-only connection and return a DataFrame.

    The reports fetcher calls this once per page load; results are not
    cached.  Column names come from the cursor, so an empty result still
    has the selected columns.  Errors propagate to the fetcher, which turns
    them into the page's error message.
    """
    conn = get_pg_connection()
    try:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(sql, params)
            columns = [col.name for col in cur.description]
            return pd.DataFrame(cur.fetchall(), columns=columns)
    finally:
        conn.close()
