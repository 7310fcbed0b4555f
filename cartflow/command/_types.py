"""
Command types — optimistic steps and their outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Callable, Awaitable
from kungfu import LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Compensator — restores what a step changed
# ═══════════════════════════════════════════════════════════════════════════════

type Compensator[T] = Callable[[T], Awaitable[None]]
"""Receives the step's value (e.g. the prior snapshot) and undoes the step."""

# ═══════════════════════════════════════════════════════════════════════════════
# Step
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Step[T, E]:
    """
    One command step: action + compensator.

    The compensator is recorded only when the action succeeds. When a later
    step fails, recorded compensators run newest first.
    """

    action: LazyCoroResult[T, E]
    compensate: Compensator[T] | None

    def then[U, E2](
        self,
        f: Callable[[T], Step[U, E2]],
    ) -> Then[T, U, E, E2]:
        """Chain another step after this one."""
        return Then(self, f)


@dataclass(frozen=True, slots=True)
class Then[T, U, E, E2]:
    """Sequential composition: the second step is built from the first value."""

    inner: Step[T, E]
    f: Callable[[T], Step[U, E2]]


type Command[T, E] = Step[T, E] | Then[object, T, object, E]

# ═══════════════════════════════════════════════════════════════════════════════
# Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CommandResult[T]:
    value: T
    steps_executed: int


@dataclass(frozen=True, slots=True)
class CommandError[E]:
    """Failure plus what the rollback managed to restore."""

    error: E
    step_failed: int
    compensators_run: int
    compensators_failed: int

    @property
    def rollback_complete(self) -> bool:
        return self.compensators_failed == 0


__all__ = (
    "Compensator",
    "Step",
    "Then",
    "Command",
    "CommandResult",
    "CommandError",
)
