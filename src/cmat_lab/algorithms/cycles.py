"""Cycle enumeration in undirected graphs (Paton's algorithm).

Finds a fundamental set of cycles of an undirected graph: every cycle of the
graph is a symmetric difference of the returned ones.

Algorithm:
    For each connected component, grow a spanning tree depth-first from an
    unvisited root. An edge (u, v) met while expanding u whose endpoint v is
    already in the tree, and that has not been used from u yet, is a back
    edge. It closes exactly one cycle: walk u's tree ancestors until reaching
    a node already adjacent to v through a used edge.

Graphs are given as adjacency mappings `node -> iterable of neighbours`; the
mapping must be symmetric (use `symmetrise` for a one-sided edge listing).

References:
- Paton, K.: "An algorithm for finding a fundamental set of cycles of a
  graph", Communications of the ACM 12(9), 1969
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from typing import Any, TypeVar

Node = TypeVar("Node", bound=Hashable)


def undirected_cycles_in(graph: Mapping[Node, Iterable[Node]]) -> list[list[Node]]:
    """Return a fundamental cycle set of an undirected graph.

    Args:
        graph: Symmetric adjacency mapping.

    Returns:
        Closed cycles (first node repeated at the end). A self-loop on u is
        returned as [u, u].

    Example:
        >>> undirected_cycles_in({0: [1, 2], 1: [0, 2], 2: [0, 1]})
        [[1, 2, 0, 1]]
    """
    cycles: list[list[Node]] = []
    done: set[Node] = set()

    for root in graph:
        if root in done:
            continue
        done.add(root)

        stack = [root]
        parent: dict[Node, Node] = {root: root}
        used: dict[Node, set[Node]] = {root: set()}

        while stack:
            u = stack.pop()
            for v in graph.get(u, ()):
                if v == u:
                    cycles.append([u, u])
                elif v not in parent:
                    # Tree edge.
                    done.add(v)
                    parent[v] = u
                    used[v] = {u}
                    stack.append(v)
                elif v not in used[u]:
                    # Back edge: close the cycle through u's ancestors.
                    reached = used[v]
                    cycle = [v, u]
                    w = parent[u]
                    while w not in reached:
                        cycle.append(w)
                        w = parent[w]
                    cycle.extend((w, v))
                    cycles.append(cycle)
                    reached.add(u)

    return cycles


def canonicalise(cycle: list[Any]) -> list[Any]:
    """Rotate and orient an open cycle for order-independent comparison.

    The result starts at the smallest node and continues towards the smaller
    of that node's two neighbours on the cycle.

    Example:
        >>> canonicalise([5, 2, 7, 1])
        [1, 5, 2, 7]
    """
    if len(cycle) < 2:
        return list(cycle)
    idx = min(range(len(cycle)), key=cycle.__getitem__)
    rotated = cycle[idx:] + cycle[:idx]
    if rotated[-1] < rotated[1]:
        rotated[1:] = rotated[:0:-1]
    return rotated


def canonical_cycles(cycles: Iterable[list[Any]]) -> list[list[Any]]:
    """Canonicalise closed cycles and sort them.

    Each cycle keeps its closing node; the list is sorted lexicographically.
    """
    result = []
    for cycle in cycles:
        ring = canonicalise(list(cycle[:-1]))
        result.append([*ring, ring[0]])
    return sorted(result)


def symmetrise(adjacency: Mapping[Node, Iterable[Node]]) -> dict[Node, list[Node]]:
    """Build a symmetric adjacency mapping from a one-sided one.

    Every node that appears as a key or a neighbour is present in the result,
    neighbours are listed once each, in first-seen order.
    """
    graph: dict[Node, list[Node]] = {}
    for u, neighbours in adjacency.items():
        graph.setdefault(u, [])
        for v in neighbours:
            graph.setdefault(v, [])
            if v not in graph[u]:
                graph[u].append(v)
            if u not in graph[v]:
                graph[v].append(u)
    return graph


__all__ = [
    "canonical_cycles",
    "canonicalise",
    "symmetrise",
    "undirected_cycles_in",
]
