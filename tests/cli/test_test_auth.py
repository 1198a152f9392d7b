"""gtasks-mcp-test-auth — token gate, task list listing, and exit codes."""

import pytest

from gtasks_mcp.cli import test_auth as check_auth
from gtasks_mcp.core.errors import AuthFailedError
from tests.services.fake_tasks import FakeTasksClient


class TokenState:
    def __init__(self, valid: bool):
        self.valid = valid

    def has_valid_token(self) -> bool:
        return self.valid


@pytest.fixture
def install(monkeypatch):
    def _install(valid=True, client=None, error=None):
        opened = []

        async def open_client(settings, auth):
            opened.append(auth)
            if error is not None:
                raise error
            return client

        monkeypatch.setattr(check_auth, "build_auth_manager", lambda settings: TokenState(valid))
        monkeypatch.setattr(check_auth, "open_tasks_client", open_client)
        return opened
    return _install


def test_without_token(install, capsys):
    opened = install(valid=False)
    assert check_auth.main([]) == 1
    assert "No valid token found!" in capsys.readouterr().err
    assert opened == []


def test_lists_task_lists(install, capsys):
    install(client=FakeTasksClient())
    assert check_auth.main([]) == 0
    out = capsys.readouterr().out
    assert "Found 2 task list(s):" in out
    assert "1. םולש" in out
    assert "   ID: list-1" in out
    assert "2. Work" in out
    assert "Test completed successfully!" in out


def test_no_task_lists(install, capsys):
    client = FakeTasksClient()
    client.task_lists = []
    install(client=client)
    assert check_auth.main([]) == 0
    assert "No task lists found." in capsys.readouterr().out


def test_rejected_token(install, capsys):
    install(error=AuthFailedError("invalid_grant"))
    assert check_auth.main([]) == 1
    assert "Error: Authentication failed: invalid_grant" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_check_connection_uses_given_auth(install, capsys):
    client = FakeTasksClient()
    opened = install(client=client)
    auth = TokenState(True)
    assert await check_auth.check_connection(None, auth) == 0
    assert opened == [auth]
    assert client.calls == [("list_task_lists",)]
