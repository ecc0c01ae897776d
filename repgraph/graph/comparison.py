"""
Comparison of two whole graphs for shared structure.
"""
import logging

from repgraph.graph import SemanticGraph


def compare_graphs(graph: SemanticGraph, other: SemanticGraph) -> None:
    """
    Mark the nodes and edges of *graph* and *other* which correspond to one another.

    The flags of both graphs are reset first.
    Then every pair of nodes, one from each graph, which `Node.is_equivalent`
    is marked by `Node.compare_node`.
    This is many-to-many: no one-to-one alignment between the graphs is computed,
    so a node may correspond to several nodes of the other graph.
    Pairs are visited in the stored node order of both graphs.
    """
    graph.reset_graph_matches()
    other.reset_graph_matches()
    if other.node_count == 0:
        return

    num_pairs = 0
    for node in graph.nodes:
        for other_node in other.nodes:
            if node.is_equivalent(other_node):
                node.compare_node(other_node)
                num_pairs += 1
    logging.debug(
        "Compared graph %s to graph %s: %s corresponding node pair(s)",
        graph.graph_id,
        other.graph_id,
        num_pairs,
    )
