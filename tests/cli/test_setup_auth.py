"""gtasks-mcp-setup-auth — credential checks, prompt flow, and exit codes."""

import pytest

from gtasks_mcp.cli import setup_auth
from gtasks_mcp.core.errors import AuthFailedError
from tests.services.fake_tasks import AUTH_URL


class FakeAuth:
    def __init__(self, valid: bool = False, error: Exception | None = None):
        self.valid = valid
        self.error = error
        self.codes: list[str] = []

    def has_valid_token(self) -> bool:
        return self.valid

    def get_auth_url(self) -> str:
        return AUTH_URL

    def authenticate(self, code: str):
        self.codes.append(code)
        if self.error is not None:
            raise self.error


@pytest.fixture
def fake_auth(monkeypatch):
    def install(auth: FakeAuth) -> FakeAuth:
        monkeypatch.setattr(setup_auth, "build_auth_manager", lambda settings: auth)
        return auth
    return install


def test_missing_credentials(monkeypatch, capsys):
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "")
    assert setup_auth.main([]) == 1
    assert "Missing credentials!" in capsys.readouterr().err


def test_already_authenticated(fake_auth, capsys):
    fake_auth(FakeAuth(valid=True))
    assert setup_auth.main([]) == 0
    assert "You are already authenticated!" in capsys.readouterr().out


def test_prompted_code_exchanged(fake_auth, capsys):
    auth = fake_auth(FakeAuth())
    prompts = []

    def prompt(text):
        prompts.append(text)
        return "4/abc"

    assert setup_auth.main([], prompt=prompt) == 0
    out = capsys.readouterr().out
    assert AUTH_URL in out
    assert "Authentication successful!" in out
    assert auth.codes == ["4/abc"]
    assert len(prompts) == 1


def test_force_with_code_skips_prompt(fake_auth):
    auth = fake_auth(FakeAuth(valid=True))

    def prompt(text):
        raise AssertionError("prompt must not be shown")

    assert setup_auth.main(["--force", "--code", "4/xyz"], prompt=prompt) == 0
    assert auth.codes == ["4/xyz"]


def test_failed_exchange(fake_auth, capsys):
    fake_auth(FakeAuth(error=AuthFailedError("invalid_grant")))
    assert setup_auth.main(["--code", "bad"]) == 1
    assert "invalid_grant" in capsys.readouterr().err


def test_empty_code(fake_auth):
    auth = fake_auth(FakeAuth())
    assert setup_auth.main([], prompt=lambda text: "   ") == 1
    assert auth.codes == []
