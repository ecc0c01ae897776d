from typing import Iterable, Sequence, Tuple

from immutablecollections import ImmutableSet, immutableset

from repgraph.graph import NO_TOP, Node, SemanticGraph

THE_DOG_BARKED = {
    "id": "20001001",
    "input": "The dog barked.",
    "source": "test",
    "tokens": [
        {"index": 0, "form": "The", "lemma": "the"},
        {"index": 1, "form": "dog", "lemma": "dog"},
        {"index": 2, "form": "barked.", "lemma": "bark"},
    ],
    "nodes": [
        {"id": 0, "label": "_the_q", "anchors": [{"from": 0, "end": 0}]},
        {"id": 1, "label": "_dog_n_1", "anchors": [{"from": 1, "end": 1}]},
        {"id": 2, "label": "_bark_v_1", "anchors": [{"from": 2, "end": 2}]},
        {"id": 3, "label": "focus_d", "anchors": [{"from": 0, "end": 2}]},
    ],
    "edges": [
        {"source": 0, "target": 1, "label": "RSTR", "post-label": "H"},
        {"source": 2, "target": 1, "label": "ARG1", "post-label": "NEQ"},
        {"source": 3, "target": 2, "label": "ARG1", "post-label": "H"},
    ],
    "tops": [2],
}

THE_DOG_SLEPT = {
    "id": "20001002",
    "input": "The dog slept.",
    "source": "test",
    "tokens": [
        {"index": 0, "form": "The", "lemma": "the"},
        {"index": 1, "form": "dog", "lemma": "dog"},
        {"index": 2, "form": "slept.", "lemma": "sleep"},
    ],
    "nodes": [
        {"id": 0, "label": "_the_q", "anchors": [{"from": 0, "end": 0}]},
        {"id": 1, "label": "_dog_n_1", "anchors": [{"from": 1, "end": 1}]},
        {"id": 2, "label": "_sleep_v_1", "anchors": [{"from": 2, "end": 2}]},
    ],
    "edges": [
        {"source": 0, "target": 1, "label": "RSTR", "post-label": "H"},
        {"source": 2, "target": 1, "label": "ARG1", "post-label": "NEQ"},
    ],
    "tops": [2],
}

DOG_PATTERN = {
    "id": "dog-pattern",
    "input": "",
    "source": "pattern",
    "tokens": [],
    "nodes": [{"label": "_the_q"}, {"label": "_dog_n_1"}],
    "edges": [{"source": 0, "target": 1, "label": "RSTR"}],
    "tops": [0],
}


def graph_from_edges(
    labels: Sequence[str],
    edges: Iterable[Tuple[int, int, str]] = (),
    *,
    top_index: int = NO_TOP,
    graph_id: str = "test",
) -> SemanticGraph:
    """
    Build a graph whose node *i* has label *labels[i]*,
    with an edge for each (source, target, label) triple in *edges*.
    """
    nodes = [Node(node_id, label) for (node_id, label) in enumerate(labels)]
    for (source, target, label) in edges:
        nodes[source].add_edge(label, nodes[target])
    return SemanticGraph.from_nodes(nodes, graph_id=graph_id, top_index=top_index)


def label_matched_ids(graph: SemanticGraph) -> ImmutableSet[int]:
    return immutableset(node.node_id for node in graph.nodes if node.label_match)


def span_matched_ids(graph: SemanticGraph) -> ImmutableSet[int]:
    return immutableset(node.node_id for node in graph.nodes if node.span_match)


def edge_matched(graph: SemanticGraph) -> ImmutableSet[Tuple[int, int, str]]:
    return immutableset(
        (node.node_id, edge.destination.node_id, edge.label)
        for node in graph.nodes
        for edge in node.edges
        if edge.edge_match
    )


def no_flags_set(graph: SemanticGraph) -> bool:
    return (
        not label_matched_ids(graph)
        and not span_matched_ids(graph)
        and not edge_matched(graph)
    )


def set_all_flags(graph: SemanticGraph) -> None:
    for node in graph.nodes:
        node.label_match = True
        node.span_match = True
        for edge in node.edges:
            edge.edge_match = True
