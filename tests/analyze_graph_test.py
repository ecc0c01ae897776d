import json

import pytest
from vistautils.parameters import Parameters

from repgraph.entry_points.analyze_graph import main
from repgraph_test_utils import DOG_PATTERN, THE_DOG_BARKED, THE_DOG_SLEPT


@pytest.fixture
def graph_file(tmp_path):
    path = tmp_path / "graphs.dmrs"
    path.write_text(
        "\n".join(json.dumps(record) for record in (THE_DOG_BARKED, THE_DOG_SLEPT, DOG_PATTERN)),
        encoding="utf-8",
    )
    return path


def _run(graph_file, output_file, **extra_params):
    params = {
        "input_file": str(graph_file),
        "graph_id": "20001001",
        "output_file": str(output_file),
    }
    params.update(extra_params)
    main(Parameters.from_mapping(params))
    with open(str(output_file), encoding="utf-8") as result_file:
        return json.load(result_file)


def _label_matched(payload):
    return [node["id"] for node in payload["nodes"] if node["label_match"]]


def test_subgraph_from_top(graph_file, tmp_path):
    result = _run(graph_file, tmp_path / "out.json", analysis="subgraph")
    assert _label_matched(result) == [1, 2]


def test_subgraph_from_named_node(graph_file, tmp_path):
    result = _run(graph_file, tmp_path / "out.json", analysis="subgraph", root_node="n3")
    assert _label_matched(result) == [1, 2, 3]


def test_compare(graph_file, tmp_path):
    result = _run(
        graph_file, tmp_path / "out.json", analysis="compare", other_graph_id="20001002"
    )
    assert _label_matched(result["graph"]) == [0, 1]
    assert _label_matched(result["other_graph"]) == [0, 1]


def test_pattern(graph_file, tmp_path):
    result = _run(
        graph_file, tmp_path / "out.json", analysis="pattern", pattern_graph_id="dog-pattern"
    )
    assert result["matched"]
    assert _label_matched(result) == [0, 1]


def test_longest_path(graph_file, tmp_path):
    result = _run(graph_file, tmp_path / "out.json", analysis="longest_path")
    assert _label_matched(result) == [1, 2, 3]


def test_cut_vertices(graph_file, tmp_path):
    result = _run(graph_file, tmp_path / "out.json", analysis="cut_vertices")
    assert [node["id"] for node in result["nodes"] if node["span_match"]] == [1, 2]


def test_unknown_graph(graph_file, tmp_path):
    with pytest.raises(RuntimeError):
        _run(graph_file, tmp_path / "out.json", analysis="subgraph", graph_id="nope")


def test_unknown_root_node(graph_file, tmp_path):
    with pytest.raises(RuntimeError):
        _run(graph_file, tmp_path / "out.json", analysis="subgraph", root_node="n42")
