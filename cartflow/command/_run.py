"""
Command execution with automatic rollback.
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from cartflow.command._types import (
    Step,
    Then,
    Command,
    CommandResult,
    CommandError,
    Compensator,
)

logger = logging.getLogger(__name__)

type RecordedCompensator[T] = tuple[T, Compensator[T]]

# ═══════════════════════════════════════════════════════════════════════════════
# run_step() — Execute single step
# ═══════════════════════════════════════════════════════════════════════════════

async def run_step[T, E](
    step: Step[T, E],
    compensators: list[RecordedCompensator[object]],
) -> Result[T, E]:
    """Execute single step, recording compensator on success."""
    result = await step.action
    match result:
        case Ok(value):
            if step.compensate is not None:
                compensators.append((value, step.compensate))  # type: ignore[arg-type]
            return Ok(value)
        case Error(e):
            return Error(e)


# ═══════════════════════════════════════════════════════════════════════════════
# run_compensators() — Rollback
# ═══════════════════════════════════════════════════════════════════════════════

async def run_compensators(
    compensators: list[RecordedCompensator[object]],
) -> tuple[int, int]:
    """Run compensators newest first. Returns (run, failed)."""
    comp_run = 0
    comp_failed = 0

    for value, comp in reversed(compensators):
        try:
            await comp(value)
            comp_run += 1
        except Exception:
            logger.exception("Rollback step failed")
            comp_failed += 1

    return comp_run, comp_failed


# ═══════════════════════════════════════════════════════════════════════════════
# run() — Execute a command
# ═══════════════════════════════════════════════════════════════════════════════

async def run[T, E](
    command: Command[T, E],
) -> Result[CommandResult[T], CommandError[E]]:
    """
    Execute a step or a chain of steps, rolling back on failure.

    Example:
        match await Cmd.run(Cmd.optimistic(read, write, new_cart, push)):
            case Ok(r):
                ...
            case Error(e):
                # local state already restored when e.rollback_complete
                report(e.error)
    """
    compensators: list[RecordedCompensator[object]] = []

    match command:
        case Then(inner, f):
            first = await run_step(inner, compensators)
            match first:
                case Ok(value):
                    result = await run_step(f(value), compensators)
                    steps = 2
                case Error(e):
                    result = Error(e)
                    steps = 1
        case Step():
            result = await run_step(command, compensators)
            steps = 1

    match result:
        case Ok(value):
            return Ok(CommandResult(value=value, steps_executed=steps))
        case Error(error):
            comp_run, comp_failed = await run_compensators(compensators)
            if comp_failed:
                logger.warning("Rollback incomplete: %d of %d restores failed", comp_failed, len(compensators))
            return Error(CommandError(
                error=error,
                step_failed=steps,
                compensators_run=comp_run,
                compensators_failed=comp_failed,
            ))


__all__ = ("run_step", "run_compensators", "run")
