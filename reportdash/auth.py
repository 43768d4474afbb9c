"""
reportdash/auth.py
Identity-provider integration and session helpers for the dashboard.
Wraps Streamlit's OIDC login so the pages never call st.login/st.logout
directly.
"""

import logging
from abc import ABC, abstractmethod
from typing import MutableMapping

import streamlit as st

from reportdash.config import (
    DASHBOARD_PAGE,
    DASHBOARD_ROUTE,
    DEFAULT_AUTH_BACKEND,
    DEFAULT_AUTH_PROVIDER,
    ENTRY_PAGE,
    ENTRY_ROUTE,
    ConfigurationError,
    get_secret,
)
from reportdash.session import Redirect, Session, SessionStore, get_session_store, guard

logger = logging.getLogger(__name__)

LOADING_KEY       = "login_in_progress"
LOADING_SHOWN_KEY = "login_in_progress_shown"


# ─── Provider interface ───────────────────────────────────────────────────────

class AuthProvider(ABC):
    """
    A third-party identity flow.

    The gate and the views only talk to this interface, so the concrete
    provider can change without touching them.
    """

    @abstractmethod
    def current_session(self) -> Session | None:
        """Return the signed-in identity, or None."""

    @abstractmethod
    def sign_in(self, provider_id: str, redirect_target: str) -> None:
        """Start the provider's sign-in flow."""

    @abstractmethod
    def sign_out(self, redirect_target: str) -> None:
        """End the session with the provider."""


class StreamlitAuthProvider(AuthProvider):
    """
    OpenID Connect through Streamlit's built-in st.login / st.user / st.logout.

    Provider credentials live in .streamlit/secrets.toml under [auth.<id>].
    Streamlit returns the browser to the page that started the flow, so the
    post-login target is reached by the login page's session subscription.
    Logout always lands on the app root.
    """

    def current_session(self) -> Session | None:
        user = st.user
        if not getattr(user, "is_logged_in", False):
            return None
        return Session(
            email=user.get("email") or "",
            name=user.get("name"),
            subject=user.get("sub"),
        )

    def sign_in(self, provider_id: str, redirect_target: str) -> None:
        logger.info("Starting sign-in with %s (return to %s)", provider_id, redirect_target)
        st.login(provider_id)

    def sign_out(self, redirect_target: str) -> None:
        if redirect_target != ENTRY_ROUTE:
            logger.warning(
                "Sign-out always returns to %s; ignoring target %s",
                ENTRY_ROUTE,
                redirect_target,
            )
        st.logout()


_BACKENDS = {
    "streamlit": StreamlitAuthProvider,
}


def get_auth_provider() -> AuthProvider:
    """Return the provider named by AUTH_BACKEND (default 'streamlit')."""
    backend = (get_secret("AUTH_BACKEND", DEFAULT_AUTH_BACKEND) or DEFAULT_AUTH_BACKEND).lower()
    try:
        return _BACKENDS[backend]()
    except KeyError:
        raise ConfigurationError(f"Unknown AUTH_BACKEND: {backend}") from None


def get_provider_id() -> str:
    """Return the identity provider passed to sign_in (default 'auth0')."""
    return get_secret("AUTH_PROVIDER", DEFAULT_AUTH_PROVIDER) or DEFAULT_AUTH_PROVIDER


# ─── Session gate ─────────────────────────────────────────────────────────────

def require_session(
    provider: AuthProvider | None = None,
    store: SessionStore | None = None,
) -> Session:
    """
    Guard for pages that require authentication.

    Call at the top of any page that must not be visible to unauthenticated
    visitors.  Redirects to the entry page immediately if no session is
    active; Streamlit stops rendering the rest of the page.  Otherwise
    returns the Session so the page can show who is signed in.
    """
    provider = provider or get_auth_provider()
    store = store or get_session_store()
    result = guard(store.refresh(provider), ENTRY_PAGE)
    if isinstance(result, Redirect):
        logger.debug("No session; redirecting to %s", result.target)
        st.switch_page(result.target)
    return result.session


# ─── Login ────────────────────────────────────────────────────────────────────

def is_login_in_progress(state: MutableMapping | None = None) -> bool:
    state = st.session_state if state is None else state
    return bool(state.get(LOADING_KEY, False))


def start_login(
    provider: AuthProvider | None = None,
    state: MutableMapping | None = None,
) -> None:
    """
    Button callback for the login page.

    Sets the loading flag and hands off to the identity provider.  The flag
    stays set while the browser is redirected, so the rerun that follows the
    click renders a disabled button and repeat clicks are ignored.  It is
    cleared if the provider raises (the error still propagates) or by
    settle_login on a later run that finds no session.
    """
    provider = provider or get_auth_provider()
    state = st.session_state if state is None else state
    if state.get(LOADING_KEY):
        return
    state[LOADING_KEY] = True
    state.pop(LOADING_SHOWN_KEY, None)
    try:
        provider.sign_in(get_provider_id(), DASHBOARD_ROUTE)
    except Exception:
        state[LOADING_KEY] = False
        raise


def settle_login(session: Session | None, state: MutableMapping | None = None) -> bool:
    """
    Call once per login page run; returns whether the button shows as loading.

    The first run after a click keeps the loading state.  If a later run still
    has no session the redirect never completed, so the flag is released.
    """
    state = st.session_state if state is None else state
    if not state.get(LOADING_KEY):
        return False
    if session is None and state.get(LOADING_SHOWN_KEY):
        state[LOADING_KEY] = False
        state.pop(LOADING_SHOWN_KEY, None)
        return False
    state[LOADING_SHOWN_KEY] = True
    return True


def redirect_when_signed_in(session: Session | None) -> None:
    """Session listener for the login page: go to the dashboard once signed in."""
    if session is not None:
        logger.info("Session present for %s; opening dashboard", session.email)
        st.switch_page(DASHBOARD_PAGE)


# ─── Session teardown ─────────────────────────────────────────────────────────

def logout(
    provider: AuthProvider | None = None,
    store: SessionStore | None = None,
) -> None:
    """
    Sign the current user out and return to the entry page.

    Clears the local session store, then asks the provider to end the
    session.  Provider errors are left to surface on their own.
    """
    provider = provider or get_auth_provider()
    store = store or get_session_store()
    store.clear()
    provider.sign_out(ENTRY_ROUTE)
