"""
blockflow — Execution Scheduler
===============================
Maps a FlowState → FlowSchedule: the order in which blocks are lowered.

Edges mean "runs after", so the schedule is a topological order of the
nodes (Kahn's algorithm).  The scheduler is a best-effort assistant, not a
strict compiler:

  • Edges whose source or target is not a known node are ignored.
  • Ties between ready nodes are broken FIFO, i.e. by node-list order.
  • Nodes left over when the queue drains (members of a cycle, or anything
    downstream of one) are appended in their original node-list order.

The result therefore always contains every distinct node id exactly once.

Internally the nodes are held in an arena indexed by integer handle, with
adjacency lists keyed by handle, so the hot loop never hashes strings.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .ir import FlowEdge, FlowNode, FlowState

logger = logging.getLogger(__name__)


# ── Schedule ─────────────────────────────────────────────────────────────────

@dataclass
class FlowSchedule:
    order: List[str] = field(default_factory=list)
    nodes: List[FlowNode] = field(default_factory=list)
    # Ids appended after Kahn's algorithm stalled (cycles).
    unresolved: List[str] = field(default_factory=list)


# ── Arena ────────────────────────────────────────────────────────────────────

class _Arena:
    """Distinct nodes by handle.  The first node carrying an id owns it."""

    def __init__(self, nodes: Iterable[FlowNode]):
        self.nodes: List[FlowNode] = []
        self.handles: Dict[str, int] = {}
        for node in nodes:
            if node.id in self.handles:
                logger.debug("duplicate node id %r; keeping first occurrence", node.id)
                continue
            self.handles[node.id] = len(self.nodes)
            self.nodes.append(node)

    def __len__(self) -> int:
        return len(self.nodes)

    def adjacency(self, edges: Iterable[FlowEdge]) -> List[List[int]]:
        outgoing: List[List[int]] = [[] for _ in self.nodes]
        for edge in edges:
            src = self.handles.get(edge.source)
            dst = self.handles.get(edge.target)
            if src is None or dst is None:
                logger.debug("ignoring dangling edge %r (%s -> %s)",
                              edge.id, edge.source, edge.target)
                continue
            outgoing[src].append(dst)
        return outgoing


# ── Scheduler ────────────────────────────────────────────────────────────────

class Scheduler:
    def __init__(self, state: FlowState):
        self.state = state

    def _kahn(self, arena: _Arena, outgoing: List[List[int]]) -> List[int]:
        indegree = [0] * len(arena)
        for targets in outgoing:
            for dst in targets:
                indegree[dst] += 1

        queue = deque(h for h in range(len(arena)) if indegree[h] == 0)
        order: List[int] = []
        while queue:
            handle = queue.popleft()
            order.append(handle)
            for dst in outgoing[handle]:
                indegree[dst] -= 1
                if indegree[dst] == 0:
                    queue.append(dst)
        return order

    # ── Public API ────────────────────────────────────────────────────────

    def build(self) -> FlowSchedule:
        """Build a FlowSchedule from the FlowState."""
        arena = _Arena(self.state.nodes)
        resolved = self._kahn(arena, arena.adjacency(self.state.edges))

        placed = [False] * len(arena)
        for handle in resolved:
            placed[handle] = True
        leftover = [h for h in range(len(arena)) if not placed[h]]
        if leftover:
            logger.debug("cycle detected; appending %d unresolved node(s) in input order",
                         len(leftover))

        handles = resolved + leftover
        return FlowSchedule(
            order=[arena.nodes[h].id for h in handles],
            nodes=[arena.nodes[h] for h in handles],
            unresolved=[arena.nodes[h].id for h in leftover],
        )


def schedule_topologically(nodes: List[FlowNode], edges: List[FlowEdge]) -> List[str]:
    """Return the node ids in dependency order (see module docstring)."""
    return Scheduler(FlowState(nodes=list(nodes), edges=list(edges))).build().order


__all__ = ["FlowSchedule", "Scheduler", "schedule_topologically"]
