r"""
Traversals along the outgoing edges of a `SemanticGraph`,
including marking the subgraph generated by a node.
"""
import logging
from typing import Iterator, List, Set

from immutablecollections import ImmutableSet, immutableset
from vistautils.preconditions import check_arg

from repgraph.graph import Node, SemanticGraph


def iter_reachable_nodes(root: Node) -> Iterator[Node]:
    """
    Iterate depth-first, in pre-order, over *root* and every node reachable from it
    by following outgoing edges in stored order.

    Each node is produced exactly once, even if the graph has cycles.
    Visitation is tracked separately from the match flags, which are not read or written.
    """
    visited: Set[int] = {root.node_id}
    yield root
    # a stack of iterators over the outgoing edges of the nodes on the current path
    stack: List[Iterator] = [iter(root.edges)]
    while stack:
        edge = next(stack[-1], None)
        if edge is None:
            stack.pop()
        elif edge.destination.node_id not in visited:
            visited.add(edge.destination.node_id)
            yield edge.destination
            stack.append(iter(edge.destination.edges))


def reachable_nodes(root: Node) -> ImmutableSet[Node]:
    """
    *root* together with every node reachable from it, in depth-first pre-order.
    """
    return immutableset(iter_reachable_nodes(root))


def mark_subgraph(graph: SemanticGraph, root: Node) -> None:
    """
    Mark the subgraph generated by *root*, which must be a node of *graph*.

    All flags on *graph* are reset first.
    Then every node reachable from *root* gets *label_match*
    and every outgoing edge of those nodes gets *edge_match*.
    """
    check_arg(root in graph, "Node %s does not belong to graph %s", (root, graph.graph_id))
    graph.reset_graph_matches()
    num_marked = 0
    for node in iter_reachable_nodes(root):
        node.label_match = True
        for edge in node.edges:
            edge.edge_match = True
        num_marked += 1
    logging.debug(
        "Marked subgraph of %s in graph %s: %s node(s)", root, graph.graph_id, num_marked
    )
