"""
Runs one analysis over a graph from a JSON-lines file
and writes the resulting visualization payload as JSON.
"""
import json
import logging
from typing import Any, Dict, Mapping, Optional

from vistautils.parameters import Parameters
from vistautils.parameters_only_entrypoint import parameters_only_entry_point

from repgraph.graph import Node, SemanticGraph
from repgraph.graph.comparison import compare_graphs
from repgraph.graph.egress import to_visualization_payload
from repgraph.graph.matcher import PatternMatcher
from repgraph.graph.structure import mark_cut_vertices, mark_longest_path
from repgraph.graph.traversal import mark_subgraph
from repgraph.graph_io import read_graphs

USAGE_MESSAGE = """
    analyze_graph.py param_file
     \twhere param_file has the following parameters:
     \t\tinput_file: a JSON-lines file of graphs
     \t\tgraph_id: the id of the graph to analyze
     \t\tanalysis: one of subgraph, compare, pattern, longest_path, cut_vertices
     \t\toutput_file: where to write the JSON result
     \tsubgraph takes an optional root_node (default: the top node).
     \tcompare takes other_graph_id.
     \tpattern takes pattern_graph_id, an optional pattern_file (default: input_file)
     \tand an optional pattern_root (default: the pattern's top node).
   """

SUBGRAPH = "subgraph"
COMPARE = "compare"
PATTERN = "pattern"
LONGEST_PATH = "longest_path"
CUT_VERTICES = "cut_vertices"
ANALYSES = (SUBGRAPH, COMPARE, PATTERN, LONGEST_PATH, CUT_VERTICES)


def main(params: Parameters) -> None:
    input_file = params.existing_file("input_file")
    analysis = params.string("analysis", valid_options=ANALYSES)
    output_file = params.creatable_file("output_file")

    graphs = read_graphs(input_file)
    graph = _get_graph(graphs, params.string("graph_id"))

    result: Dict[str, Any]
    if analysis == SUBGRAPH:
        mark_subgraph(graph, _get_node(graph, params.optional_string("root_node")))
        result = to_visualization_payload(graph)
    elif analysis == COMPARE:
        other_graph = _get_graph(graphs, params.string("other_graph_id"))
        compare_graphs(graph, other_graph)
        result = {
            "graph": to_visualization_payload(graph),
            "other_graph": to_visualization_payload(other_graph),
        }
    elif analysis == PATTERN:
        pattern_file = params.optional_existing_file("pattern_file")
        pattern_graphs = read_graphs(pattern_file) if pattern_file else graphs
        pattern_graph = _get_graph(pattern_graphs, params.string("pattern_graph_id"))
        matcher = PatternMatcher(
            _get_node(pattern_graph, params.optional_string("pattern_root"))
        )
        matched = matcher.graph_match(graph)
        result = to_visualization_payload(graph)
        result["matched"] = matched
    elif analysis == LONGEST_PATH:
        mark_longest_path(graph)
        result = to_visualization_payload(graph)
    elif analysis == CUT_VERTICES:
        mark_cut_vertices(graph)
        result = to_visualization_payload(graph)
    else:
        raise RuntimeError(f"Unknown analysis {analysis}")

    logging.info("Writing %s result for graph %s to %s", analysis, graph.graph_id, output_file)
    with open(str(output_file), "w", encoding="utf-8") as out:
        json.dump(result, out, indent=2)


def _get_graph(graphs: Mapping[str, SemanticGraph], graph_id: str) -> SemanticGraph:
    graph = graphs.get(graph_id)
    if graph is None:
        raise RuntimeError(f"No graph with id {graph_id}; known graphs: {list(graphs)}")
    return graph


def _get_node(graph: SemanticGraph, node_id: Optional[str] = None) -> Node:
    """
    The node of *graph* named by *node_id*, or its top node if *node_id* is not given.
    """
    if node_id is None:
        node = graph.top_node
        if node is None:
            raise RuntimeError(
                f"Graph {graph.graph_id} has no top node and no node was specified"
            )
        return node
    node = graph.find_node_by_id(node_id)
    if node is None:
        raise RuntimeError(f"Graph {graph.graph_id} has no node {node_id}")
    return node


if __name__ == "__main__":
    parameters_only_entry_point(main, usage_message=USAGE_MESSAGE)
