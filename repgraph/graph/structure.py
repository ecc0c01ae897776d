"""
Structural analyses of a whole `SemanticGraph`: longest paths, cut vertices
and a summary of graph-theoretic properties.

These work on the `networkx` view of the graph from `SemanticGraph.copy_as_digraph`.
"""
import logging
from typing import Optional, Tuple

from attr import attrib, attrs
from attr.validators import instance_of, optional
from immutablecollections import ImmutableSet, immutableset
from immutablecollections.converter_utils import _to_immutableset
from more_itertools import first, pairwise
from networkx import (
    articulation_points,
    check_planarity,
    dag_longest_path,
    is_directed_acyclic_graph,
    is_weakly_connected,
)

from repgraph.graph import Node, SemanticGraph


def longest_path(graph: SemanticGraph) -> Tuple[Node, ...]:
    """
    The nodes of a longest directed path through *graph*, counting edges.

    When several paths are equally long, which one is returned is deterministic but undefined.
    Raises a `RuntimeError` if *graph* has a cycle.
    """
    if not graph.nodes:
        return ()
    digraph = graph.copy_as_digraph()
    if not is_directed_acyclic_graph(digraph):
        raise RuntimeError(
            f"Graph {graph.graph_id} is cyclic, so it has no well-defined longest path"
        )
    return tuple(graph.nodes[node_id] for node_id in dag_longest_path(digraph))


def mark_longest_path(graph: SemanticGraph) -> Tuple[Node, ...]:
    """
    Reset *graph*, then mark a `longest_path` through it.

    Path nodes get *label_match*.
    Between each pair of consecutive path nodes,
    the first stored edge connecting them gets *edge_match*.

    Returns the path.
    """
    graph.reset_graph_matches()
    path = longest_path(graph)
    for node in path:
        node.label_match = True
    for (source, destination) in pairwise(path):
        connecting_edge = first(
            edge for edge in source.edges if edge.destination is destination
        )
        connecting_edge.edge_match = True
    logging.debug("Longest path in graph %s: %s", graph.graph_id, path)
    return path


def cut_vertices(graph: SemanticGraph) -> ImmutableSet[Node]:
    """
    The nodes whose removal would disconnect *graph* when edge directions are ignored,
    in stored node order.
    """
    undirected = graph.copy_as_digraph().to_undirected()
    cut_vertex_ids = set(articulation_points(undirected))
    return immutableset(node for node in graph.nodes if node.node_id in cut_vertex_ids)


def mark_cut_vertices(graph: SemanticGraph) -> ImmutableSet[Node]:
    """
    Reset *graph*, then set *span_match* on each of its `cut_vertices`.

    Returns the cut vertices.
    """
    graph.reset_graph_matches()
    cut_vertex_nodes = cut_vertices(graph)
    for node in cut_vertex_nodes:
        node.span_match = True
    logging.debug("Cut vertices in graph %s: %s", graph.graph_id, cut_vertex_nodes)
    return cut_vertex_nodes


@attrs(frozen=True, slots=True)
class GraphProperties:
    """
    Graph-theoretic properties of a `SemanticGraph`.
    """

    is_connected: bool = attrib(validator=instance_of(bool))
    """
    Whether the graph is non-empty and connected when edge directions are ignored.
    """
    is_cyclic: bool = attrib(validator=instance_of(bool))
    is_planar: bool = attrib(validator=instance_of(bool))
    longest_path_length: Optional[int] = attrib(validator=optional(instance_of(int)))
    """
    The number of edges on a longest directed path, or *None* if the graph is cyclic.
    """
    cut_vertex_ids: ImmutableSet[int] = attrib(converter=_to_immutableset)


def graph_properties(graph: SemanticGraph) -> GraphProperties:
    """
    Compute the `GraphProperties` of *graph*. No match flags are touched.
    """
    digraph = graph.copy_as_digraph()
    is_cyclic = not is_directed_acyclic_graph(digraph)
    (is_planar, _) = check_planarity(digraph.to_undirected())
    return GraphProperties(
        is_connected=len(digraph) > 0 and is_weakly_connected(digraph),
        is_cyclic=is_cyclic,
        is_planar=is_planar,
        longest_path_length=None if is_cyclic else max(len(longest_path(graph)) - 1, 0),
        cut_vertex_ids=[node.node_id for node in cut_vertices(graph)],
    )
