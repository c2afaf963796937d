from typing import Any, Awaitable, Callable

from duvidapp.exceptions import DuvidAppError


async def run_optimistic(
    apply_local: Callable[[], None],
    commit_remote: Callable[[], Awaitable[Any]],
    revert_local: Callable[[], None],
) -> Any:
    """Apply a local change, confirm it remotely, undo it if the remote write fails.

    The local change is visible before the request is awaited. On failure
    `revert_local` runs before the error is re-raised to the store.
    """
    apply_local()
    try:
        return await commit_remote()
    except DuvidAppError:
        revert_local()
        raise
