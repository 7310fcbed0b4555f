"""
Graph runner — nodnod with checkout conventions.

A node signals failure by raising ``CheckoutError``; ``Run.result()`` hands it
back as ``Error(...)`` so callers only ever see a ``Result``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, cast

from kungfu import Error, Ok, Result
from nodnod import EventLoopAgent, Node, Scope, Value

from cartflow.errors import CheckoutError

type Injection = tuple[type[Any], Any]


def build_agent(target: type[Any]) -> EventLoopAgent:
    """Discover every node ``target`` depends on and plan their execution."""
    return EventLoopAgent.build({cast(type[Node[Any, Any]], target)})


# ═══════════════════════════════════════════════════════════════════════════════
# Run
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Run[T]:
    """
    One execution of a graph, built up fluently and awaited.

        preview = await (
            run(PreviewNode)
            .inject(request)
            .inject_as(CatalogService, catalog)
        )
    """

    target: type[T]
    injections: tuple[Injection, ...] = ()
    agent: EventLoopAgent | None = field(default=None, compare=False)

    def inject(self, value: object) -> Run[T]:
        """Provide ``value`` to nodes asking for its exact runtime type."""
        return self.inject_as(type(value), value)

    def inject_as[V](self, typ: type[V], value: V) -> Run[T]:
        """Provide ``value`` under ``typ``. Ports are protocols, so they go through here."""
        return Run(self.target, (*self.injections, (typ, value)), self.agent)

    def given(self, *values: object) -> Run[T]:
        built = self
        for value in values:
            built = built.inject(value)
        return built

    def __await__(self) -> Any:
        return self._execute().__await__()

    async def _execute(self) -> T:
        agent = self.agent if self.agent is not None else build_agent(self.target)
        async with Scope(detail=f"graph:{self.target.__name__}") as scope:
            for typ, value in self.injections:
                scope.push(Value(typ, value))
            await agent.run(scope, {})
            computed = scope.get(self.target)
            if computed is None:
                raise LookupError(f"{self.target.__name__} was not computed")
            return cast(T, computed.value)

    async def result(self) -> Result[T, CheckoutError]:
        try:
            return Ok(await self._execute())
        except CheckoutError as e:
            return Error(e)


def run[T](target: type[T]) -> Run[T]:
    return Run(target)


# ═══════════════════════════════════════════════════════════════════════════════
# Compiled
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Compiled[T]:
    """Agent planned once at import, reused for every preview recomputation."""

    target: type[T]
    agent: EventLoopAgent

    def run(self) -> Run[T]:
        return Run(self.target, agent=self.agent)

    async def __call__(self, *values: object) -> T:
        return await self.run().given(*values)


def graph[T](target: type[T]) -> Compiled[T]:
    return Compiled(target, build_agent(target))


__all__ = ("Injection", "Run", "run", "Compiled", "graph", "build_agent")
