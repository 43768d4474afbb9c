"""
reportdash/session.py
Session value, per-client observable session store, and the pure gate that
decides whether a protected page renders or redirects.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, MutableMapping, Optional

import streamlit as st

from reportdash.config import ENTRY_PAGE

logger = logging.getLogger(__name__)

STORE_KEY = "session_store"


@dataclass(frozen=True)
class Session:
    """An authenticated identity as reported by the identity provider."""

    email: str
    name: str | None = None
    subject: str | None = None


Listener = Callable[[Optional[Session]], None]


# ─── Gate results ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Render:
    session: Session


@dataclass(frozen=True)
class Redirect:
    target: str


def guard(session: Session | None, entry_page: str = ENTRY_PAGE) -> Render | Redirect:
    """
    Decide what a protected page does for the given session.

    Returns Render(session) when a session is present and Redirect(entry_page)
    otherwise.  A missing session is a routing outcome, not an error.
    """
    if session is None:
        return Redirect(entry_page)
    return Render(session)


# ─── Observable store ─────────────────────────────────────────────────────────

class SessionStore:
    """
    Holds the current session for one browser client and notifies listeners
    when it changes.

    Listener exceptions are not caught: Streamlit navigates by raising from
    st.switch_page, and that has to reach the script runner.
    """

    def __init__(self, session: Session | None = None):
        self._session = session
        self._listeners: list[Listener] = []

    @property
    def current(self) -> Session | None:
        return self._session

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: Listener, replay: bool = True) -> Callable[[], None]:
        """
        Register `listener` and return a callable that removes it again.

        With replay=True the listener is called straight away with the current
        value, so subscribers never miss a session that already exists.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        if replay:
            try:
                listener(self._session)
            except BaseException:
                unsubscribe()
                raise
        return unsubscribe

    @contextmanager
    def subscription(self, listener: Listener, replay: bool = True):
        """Subscribe for the duration of a `with` block."""
        unsubscribe = self.subscribe(listener, replay=replay)
        try:
            yield self
        finally:
            unsubscribe()

    def set(self, session: Session | None) -> None:
        """Store `session` and notify listeners if it differs from the current one."""
        if session == self._session:
            return
        self._session = session
        logger.debug("Session changed: %s", "signed in" if session else "signed out")
        for listener in list(self._listeners):
            listener(session)

    def clear(self) -> None:
        self.set(None)

    def refresh(self, provider) -> Session | None:
        """Pull the current session from an AuthProvider and return it."""
        self.set(provider.current_session())
        return self._session


def get_session_store(state: MutableMapping | None = None) -> SessionStore:
    """
    Return the SessionStore for the current browser client.

    Defaults to st.session_state, which Streamlit keeps per client and never
    shares between users.  Tests pass a plain dict instead.
    """
    if state is None:
        state = st.session_state
    if STORE_KEY not in state:
        state[STORE_KEY] = SessionStore()
    return state[STORE_KEY]
