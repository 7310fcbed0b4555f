"""
Command — optimistic local changes with rollback on remote failure.

    from cartflow import command as Cmd

    result = await Cmd.run(Cmd.optimistic(read, write, new_state, remote_effect))
"""

from __future__ import annotations

from cartflow.command._types import (
    Compensator,
    Step,
    Then,
    Command,
    CommandResult,
    CommandError,
)
from cartflow.command._step import step, local_write, optimistic
from cartflow.command._run import run
from cartflow.command._gate import LoadingGate

__all__ = (
    "Compensator",
    "Step",
    "Then",
    "Command",
    "CommandResult",
    "CommandError",
    "step",
    "local_write",
    "optimistic",
    "run",
    "LoadingGate",
)
