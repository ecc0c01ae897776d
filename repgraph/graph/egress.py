"""
The payload through which an external renderer sees a `SemanticGraph` and its match flags.

Layout and colours are the renderer's business; nothing here positions or styles anything.
"""
from typing import Any, Dict

from repgraph.graph import SemanticGraph, Token, spanned_token_indices


def _token_to_json_dict(token: Token) -> Dict[str, Any]:
    return {
        "index": token.index,
        "form": token.form,
        "lemma": token.lemma,
        "carg": token.carg,
    }


def to_visualization_payload(graph: SemanticGraph) -> Dict[str, Any]:
    """
    Get a JSON-serializable description of *graph* and its current match flags.
    """
    return {
        "id": graph.graph_id,
        "input": graph.sentence,
        "source": graph.source,
        "top": graph.top_index,
        "tokens": [_token_to_json_dict(token) for token in graph.tokens],
        "nodes": [
            {
                "id": node.node_id,
                "label": node.label,
                "abstract": node.abstract,
                "tokens": list(spanned_token_indices(node)),
                "label_match": node.label_match,
                "span_match": node.span_match,
            }
            for node in graph.nodes
        ],
        "edges": [
            {
                "source": node.node_id,
                "target": edge.destination.node_id,
                "label": edge.label,
                "full_label": edge.full_label,
                "edge_match": edge.edge_match,
            }
            for node in graph.nodes
            for edge in node.edges
        ],
    }
