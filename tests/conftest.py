"""Shared fakes for the Streamlit, Supabase and identity-provider boundaries."""

from types import SimpleNamespace

import pytest

from reportdash.auth import AuthProvider
from reportdash.session import SessionStore

_SETTINGS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_USER",
    "DB_PASSWORD",
    "REPORTS_SOURCE",
    "AUTH_BACKEND",
    "AUTH_PROVIDER",
    "DISPLAY_TIMEZONE",
    "LOG_LEVEL",
)


class SwitchPage(BaseException):
    """Stands in for the control-flow exception raised by st.switch_page."""

    def __init__(self, target):
        super().__init__(target)
        self.target = target


class FakeStreamlit:
    """Records the st.* calls the package makes."""

    def __init__(self):
        self.calls = []
        self.user = SimpleNamespace(is_logged_in=False)

    def error(self, body):
        self.calls.append(("error", body))

    def info(self, body):
        self.calls.append(("info", body))

    def markdown(self, body, unsafe_allow_html=False):
        self.calls.append(("markdown", body))

    def switch_page(self, page):
        self.calls.append(("switch_page", page))
        raise SwitchPage(page)

    def login(self, provider=None):
        self.calls.append(("login", provider))

    def logout(self):
        self.calls.append(("logout", None))

    def kinds(self):
        return [kind for kind, _ in self.calls]


class FakeProvider(AuthProvider):
    def __init__(self, session=None):
        self.session = session
        self.sign_ins = []
        self.sign_outs = []

    def current_session(self):
        return self.session

    def sign_in(self, provider_id, redirect_target):
        self.sign_ins.append((provider_id, redirect_target))

    def sign_out(self, redirect_target):
        self.sign_outs.append(redirect_target)
        self.session = None


class FakeQuery:
    """Chainable stand-in for a Supabase table query."""

    def __init__(self, client):
        self.client = client

    def select(self, columns):
        self.client.calls.append(("select", columns))
        return self

    def order(self, column, desc=False):
        self.client.calls.append(("order", column, desc))
        return self

    def execute(self):
        self.client.calls.append(("execute",))
        if self.client.error is not None:
            raise self.client.error
        return SimpleNamespace(data=self.client.rows)


class FakeSupabase:
    def __init__(self, rows=None, error=None):
        self.rows = rows
        self.error = error
        self.calls = []

    def table(self, name):
        self.calls.append(("table", name))
        return FakeQuery(self)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for key in _SETTINGS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def fake_st():
    return FakeStreamlit()


@pytest.fixture
def store():
    return SessionStore()
