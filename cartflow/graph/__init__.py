"""
Graph — computation graphs with auto-parallelization.

    from cartflow import graph as G

    @G.node
    class RulesNode:
        def __init__(self, rules: tuple[DiscountRule, ...]) -> None:
            self.rules = rules

        @classmethod
        async def __compose__(cls, request: RequestNode, discounts: DiscountService) -> "RulesNode":
            ...

    result = await G.run(PreviewNode).given(request).inject_as(DiscountService, svc).result()

Independent nodes run concurrently on the event loop.
"""

from nodnod import scalar_node as node

from cartflow.graph._run import (
    Injection,
    Run,
    run,
    Compiled,
    graph,
)

__all__ = (
    "node",
    "Injection",
    "Run",
    "run",
    "Compiled",
    "graph",
)
