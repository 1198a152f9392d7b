"""Test doubles for the dispatcher's collaborators.

Invariants:
    - No test touches Google: the client is an in-memory fake
    - CountingProvider records every get_client() call so tests can assert zero
"""

import asyncio

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth?client_id=test"


class FakeTasksClient:
    """In-memory stand-in recording every call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.task_lists = [
            {"id": "list-1", "title": "שלום", "updated": "2024-01-01T00:00:00.000Z"},
            {"id": "list-2", "title": "Work", "updated": "2024-01-02T00:00:00.000Z"},
        ]
        self.tasks = [
            {"id": "task-1", "title": "Buy milk", "status": "needsAction"},
        ]

    async def list_task_lists(self):
        self.calls.append(("list_task_lists",))
        return self.task_lists

    async def get_task_list(self, task_list_id):
        self.calls.append(("get_task_list", task_list_id))
        return {"id": task_list_id, "title": "Work"}

    async def create_task_list(self, title):
        self.calls.append(("create_task_list", title))
        return {"id": "new-list", "title": title}

    async def update_task_list(self, task_list_id, title):
        self.calls.append(("update_task_list", task_list_id, title))
        return {"id": task_list_id, "title": title}

    async def delete_task_list(self, task_list_id):
        self.calls.append(("delete_task_list", task_list_id))

    async def list_tasks(
        self, task_list_id, show_completed=False, show_hidden=False, max_results=100,
    ):
        self.calls.append(
            ("list_tasks", task_list_id, show_completed, show_hidden, max_results),
        )
        return self.tasks

    async def get_task(self, task_list_id, task_id):
        self.calls.append(("get_task", task_list_id, task_id))
        return {"id": task_id, "title": "Buy milk"}

    async def create_task(self, task_list_id, title, notes=None, due=None, parent=None):
        self.calls.append(("create_task", task_list_id, title, notes, due, parent))
        return {"id": "new-task", "title": title, "notes": notes}

    async def update_task(self, task_list_id, task_id, updates):
        self.calls.append(("update_task", task_list_id, task_id, updates))
        return {"id": task_id, **updates}

    async def delete_task(self, task_list_id, task_id):
        self.calls.append(("delete_task", task_list_id, task_id))

    async def move_task(self, task_list_id, task_id, parent=None, previous=None):
        self.calls.append(("move_task", task_list_id, task_id, parent, previous))
        return {"id": task_id, "parent": parent}

    async def clear_completed_tasks(self, task_list_id):
        self.calls.append(("clear_completed_tasks", task_list_id))


class CountingProvider:
    """ClientProvider double: returns the fake client (or raises) and counts calls."""

    def __init__(self, client=None, error: Exception | None = None):
        self.client = client or FakeTasksClient()
        self.error = error
        self.calls = 0

    async def get_client(self):
        self.calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.client


class StaticAuthUrls:
    def __init__(self, url: str = AUTH_URL):
        self.url = url
        self.calls = 0

    def get_auth_url(self) -> str:
        self.calls += 1
        return self.url
