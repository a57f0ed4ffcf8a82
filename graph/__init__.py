"""
graph/
-----
Graph input model.  Public API:

    from graph import Graph, Edge
    from graph import GraphFormatError, WeightError
"""

from graph.edge  import Edge
from graph.graph import Graph, GraphFormatError, WeightError, reconstruct_path

__all__ = [
    "Edge",
    "Graph",
    "GraphFormatError",
    "WeightError",
    "reconstruct_path",
]
