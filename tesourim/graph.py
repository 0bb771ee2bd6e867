"""
Grid adjacency graph and trap-aware reachability
"""

from typing import AbstractSet, Dict, List

# Row/column offsets of the 8 neighbours, top-left to bottom-right
NEIGHBOR_OFFSETS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)

Graph = Dict[int, List[int]]


def generate_graph(size: int) -> Graph:
    """Connect every node of a size x size grid to its (up to 8) neighbours."""
    graph: Graph = {}
    for node in range(size * size):
        row, col = divmod(node, size)
        neighbors = []
        for dr, dc in NEIGHBOR_OFFSETS:
            r, c = row + dr, col + dc
            if 0 <= r < size and 0 <= c < size:
                neighbors.append(r * size + c)
        graph[node] = neighbors
    return graph


def can_reach(graph: Graph, traps: AbstractSet[int], start: int, target: int) -> bool:
    """
    Depth-first search from `start` to `target` that never steps on a trap.

    A trap is checked before the target, so a trapped target (or start) is
    never reachable.
    """
    visited = set()
    stack = [start]
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        if current in traps:
            continue
        if current == target:
            return True
        visited.add(current)
        # Reversed so neighbours are explored in adjacency order
        for neighbor in reversed(graph.get(current, ())):
            if neighbor not in visited:
                stack.append(neighbor)
    return False
