"""
edge.py — Graph Edge
====================
Connects two nodes and carries a weight.

Design decisions:
  - `source` and `target` are node-id strings, not object references,
    so edges serialise cleanly into Step payloads and JSON.
  - Ids are assigned by the Graph in insertion order ("e0", "e1", …).
    That keeps ids identical across two parses of the same input, which
    the replay guarantee depends on.
  - Visual state (relaxed / chosen / ignored) is NOT stored here.  It
    belongs to the VisualizationState folded from Steps.
"""

from typing import Optional


class Edge:
    """
    Attributes:
        id       : Stable identifier assigned by the owning Graph.
        source   : ID of the tail node.
        target   : ID of the head node.
        weight   : Numeric cost (default 1). May be negative for Bellman-Ford input.
        directed : If False, traversal works in both directions.
    """

    __slots__ = ("id", "source", "target", "weight", "directed")

    def __init__(
        self,
        source: str,
        target: str,
        weight: float = 1.0,
        directed: bool = True,
        edge_id: Optional[str] = None,
    ):
        self.id:       str   = edge_id or f"{source}->{target}"
        self.source:   str   = source
        self.target:   str   = target
        self.weight:   float = weight
        self.directed: bool  = directed

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":       self.id,
            "source":   self.source,
            "target":   self.target,
            "weight":   self.weight,
            "directed": self.directed,
        }

    def __repr__(self) -> str:
        arrow = " → " if self.directed else " ↔ "
        return f"Edge({self.source}{arrow}{self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.id)
