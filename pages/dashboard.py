"""
pages/dashboard.py
Protected dashboard ("/dashboard"): welcome header, sign-out and the
report list.
"""

import streamlit as st

from reportdash.auth import get_auth_provider, logout, require_session
from reportdash.config import configure_logging
from reportdash.render import render_reports
from reportdash.reports import fetch_reports
from reportdash.session import get_session_store

configure_logging()

st.set_page_config(page_title="Reportes", page_icon="📄", layout="centered")

provider = get_auth_provider()
store    = get_session_store()

# ─── Auth guard ───────────────────────────────────────────────────────────────

session = require_session(provider, store)

# ─── Header ───────────────────────────────────────────────────────────────────

col_user, col_signout = st.columns([3, 1], vertical_alignment="center")
with col_user:
    st.markdown("## ¡Bienvenido!")
    st.caption(session.email)
with col_signout:
    st.button(
        "Cerrar Sesión",
        on_click=logout,
        kwargs={"provider": provider, "store": store},
        use_container_width=True,
    )

st.divider()

# ─── Reports ──────────────────────────────────────────────────────────────────

st.subheader("Reportes")

with st.spinner("Cargando reportes..."):
    result = fetch_reports()

render_reports(result.reports, result.error)
