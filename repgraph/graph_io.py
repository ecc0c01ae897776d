r"""
Reading `SemanticGraph`\ s from disk.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Union

from immutablecollections import ImmutableDict, immutabledict

from repgraph.graph import GraphIngestionError, SemanticGraph


def read_graphs(path: Union[Path, str]) -> ImmutableDict[str, SemanticGraph]:
    """
    Read a JSON-lines file with one graph record per line, keyed by graph id
    in the order they appear.

    Blank lines are skipped.
    A malformed line or a repeated graph id raises a `GraphIngestionError`.
    """
    graphs: Dict[str, SemanticGraph] = {}
    with open(str(path), "rb") as graph_file:
        for (line_number, line) in enumerate(graph_file, start=1):
            if not line.strip():
                continue
            try:
                graph = SemanticGraph.from_json_dict(json.loads(line.decode("utf-8")))
            except (ValueError, GraphIngestionError) as e:
                raise GraphIngestionError(
                    f"Cannot read graph on line {line_number} of {path}: {e}"
                ) from e
            if graph.graph_id in graphs:
                raise GraphIngestionError(
                    f"Graph id {graph.graph_id} on line {line_number} of {path} "
                    f"was already used"
                )
            graphs[graph.graph_id] = graph
    logging.info("Read %s graph(s) from %s", len(graphs), path)
    return immutabledict(graphs)
