"""Boundary Protocols — contracts between the dispatcher and its collaborators.

Invariants:
    - Dispatcher NEVER imports the Google SDK — it sees these Protocols only
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - Async in Protocol: implementations do network IO
"""

from typing import Any, Protocol


class TasksClient(Protocol):
    """Contract for the wrapped Google Tasks API — implemented by infrastructure."""
    async def list_task_lists(self) -> list[dict]: ...
    async def get_task_list(self, task_list_id: str) -> dict: ...
    async def create_task_list(self, title: str) -> dict: ...
    async def update_task_list(self, task_list_id: str, title: str) -> dict: ...
    async def delete_task_list(self, task_list_id: str) -> None: ...
    async def list_tasks(
        self,
        task_list_id: str,
        show_completed: bool = False,
        show_hidden: bool = False,
        max_results: int = 100,
    ) -> list[dict]: ...
    async def get_task(self, task_list_id: str, task_id: str) -> dict: ...
    async def create_task(
        self,
        task_list_id: str,
        title: str,
        notes: str | None = None,
        due: str | None = None,
        parent: str | None = None,
    ) -> dict: ...
    async def update_task(
        self, task_list_id: str, task_id: str, updates: dict[str, Any],
    ) -> dict: ...
    async def delete_task(self, task_list_id: str, task_id: str) -> None: ...
    async def move_task(
        self,
        task_list_id: str,
        task_id: str,
        parent: str | None = None,
        previous: str | None = None,
    ) -> dict: ...
    async def clear_completed_tasks(self, task_list_id: str) -> None: ...


class ClientProvider(Protocol):
    """Yields the authenticated client; raises AuthRequiredError / AuthFailedError."""
    async def get_client(self) -> TasksClient: ...


class AuthUrlProvider(Protocol):
    """Builds the OAuth consent URL without any stored credential."""
    def get_auth_url(self) -> str: ...
