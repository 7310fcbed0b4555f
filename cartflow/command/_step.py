"""
Step creation, including the optimistic local write.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Never

from kungfu import LazyCoroResult, Ok, Result

from cartflow.command._types import Step, Then, Compensator


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: Compensator[T] | None = None,
) -> Step[T, E]:
    """
    Create a compensated step.

    Example:
        from cartflow import command as Cmd

        sync = Cmd.step(
            L.catching_async(
                lambda: carts.update_item(line_id, quantity),
                on_error=as_checkout_error,
            ),
        )
    """
    return Step(action=action, compensate=compensate)


def local_write[S](
    read: Callable[[], S],
    write: Callable[[S], None],
    new_state: S,
) -> Step[S, Never]:
    """
    Replace local state right away; the compensator puts the snapshot back.

    The step's value is the snapshot taken before the write.
    """

    async def apply() -> Result[S, Never]:
        snapshot = read()
        write(new_state)
        return Ok(snapshot)

    async def restore(snapshot: S) -> None:
        write(snapshot)

    return Step(action=LazyCoroResult(apply), compensate=restore)


def optimistic[S, T, E](
    read: Callable[[], S],
    write: Callable[[S], None],
    new_state: S,
    remote: LazyCoroResult[T, E],
) -> Then[S, T, Never, E]:
    """
    Optimistic update: write ``new_state`` locally, then run ``remote``.

    If ``remote`` fails the local state is reverted to the snapshot.

        command = Cmd.optimistic(session.get, session.set, updated_cart, push)
        result = await Cmd.run(command)
    """
    return local_write(read, write, new_state).then(lambda _: step(remote))


__all__ = ("step", "local_write", "optimistic")
