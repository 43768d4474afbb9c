"""
app.py
Reportes: authenticated report dashboard.
Entry point and login page ("/").  Starts the identity-provider sign-in and
moves on to the dashboard as soon as a session exists.
"""

import streamlit as st

from reportdash.auth import (
    get_auth_provider,
    redirect_when_signed_in,
    settle_login,
    start_login,
)
from reportdash.config import configure_logging
from reportdash.session import get_session_store

configure_logging()

st.set_page_config(
    page_title = "Reportes · Iniciar Sesión",
    page_icon  = "🔐",
    layout     = "centered",
)

provider = get_auth_provider()
store    = get_session_store()

# ─── Signed-in visitors go straight to the dashboard ─────────────────────────

with store.subscription(redirect_when_signed_in):
    store.refresh(provider)

# ─── Login card ───────────────────────────────────────────────────────────────

st.markdown(
    """
    <div style="text-align:center;margin:48px 0 24px;">
      <h1 style="margin:0;font-size:2rem;font-weight:700;">Iniciar Sesión</h1>
      <p style="margin:8px 0 0;color:#888;">Accede a tu cuenta con Auth0</p>
    </div>
    """,
    unsafe_allow_html=True,
)

loading = settle_login(store.current)

st.button(
    "⏳ Cargando..." if loading else "🔐 Inicia sesión con Auth0",
    type="primary",
    disabled=loading,
    on_click=start_login,
    kwargs={"provider": provider},
    use_container_width=True,
)

st.divider()
st.caption("Esta es una interfaz segura de autenticación")
