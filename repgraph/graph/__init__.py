r"""
Representation of a semantic dependency graph (e.g. a DMRS graph) over a tokenized sentence.

A `SemanticGraph` owns a dense sequence of `Node`\ s and a sequence of `Token`\ s.
A node's position in the node sequence is its identity,
and every cross-reference within a graph (edge endpoints, predecessor lists, the top node)
is resolved through that position.

Nodes and edges carry mutable match flags which the analyses in
`repgraph.graph.traversal`, `repgraph.graph.comparison`, `repgraph.graph.matcher`
and `repgraph.graph.structure` set,
and which a renderer later reads through `repgraph.graph.egress`.
Everything else about a graph is fixed once it is built.
"""
from collections import Counter
from typing import (
    Any,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Sized,
    Tuple,
    Union,
)

from attr import attrib, attrs
from attr.validators import deep_iterable, instance_of, optional
from immutablecollections import immutabledict
from immutablecollections.converter_utils import _to_tuple
from networkx import DiGraph
from vistautils.misc_utils import str_list_limited

LABEL = "label"

NO_TOP = -1
"""
The value of `SemanticGraph.top_index` for a graph without a top node.
"""

SURFACE_PREDICATE_PREFIX = "_"
"""
DMRS surface predicates (those realized directly by a token) have labels starting with this.
"""


@attrs(auto_exc=True, auto_attribs=True)
class GraphIngestionError(RuntimeError):
    """
    Raised when a graph record is malformed.

    No partial graph is ever produced when this is raised.
    """

    msg: str


@attrs(frozen=True, slots=True)
class Token:
    """
    A lexical unit of the source sentence.
    """

    index: int = attrib(validator=instance_of(int))
    form: str = attrib(validator=instance_of(str))
    lemma: str = attrib(validator=instance_of(str))
    carg: Optional[str] = attrib(validator=optional(instance_of(str)), default=None)
    """
    The constant (literal) value of the token, if any, e.g. for names and numbers.
    """

    @staticmethod
    def from_json_dict(token_record: Mapping[str, Any]) -> "Token":
        return Token(
            index=token_record["index"],
            form=token_record["form"],
            lemma=token_record["lemma"],
            carg=token_record.get("carg"),
        )

    def __str__(self) -> str:
        if self.carg is not None:
            return f"{self.index}:{self.form}[{self.lemma}/{self.carg}]"
        return f"{self.index}:{self.form}[{self.lemma}]"


@attrs(slots=True, eq=False, repr=False)
class Edge:
    """
    A labelled, directed connection from the `Node` which owns it to *destination*.

    The source of an edge is implicit: it is the node whose `Node.edges` contains it.
    """

    label: str = attrib(validator=instance_of(str))
    destination: "Node" = attrib()
    post_label: Optional[str] = attrib(
        validator=optional(instance_of(str)), default=None, kw_only=True
    )
    """
    The DMRS post-slash label (e.g. *EQ* or *NEQ*), if any.
    This is not considered when matching.
    """
    edge_match: bool = attrib(default=False, init=False)

    @destination.validator
    def _check_destination(self, _attribute, value) -> None:
        if not isinstance(value, Node):
            raise RuntimeError(f"Edge destination must be a Node but got {value}")

    @property
    def full_label(self) -> str:
        if self.post_label:
            return f"{self.label}/{self.post_label}"
        return self.label

    def __repr__(self) -> str:
        return f"-{self.full_label}->n{self.destination.node_id}"


@attrs(slots=True, eq=False, repr=False)
class Node:
    r"""
    A labelled vertex of a `SemanticGraph`.

    A node may span zero or more `Token`\ s and may be *abstract*,
    meaning it is not directly realized by a token.
    Nodes are compared by identity;
    `is_equivalent` gives the looser notion of equality used when comparing graphs.

    *label_match* and *span_match* are the node's match flags.
    """

    node_id: int = attrib(validator=instance_of(int))
    label: str = attrib(validator=instance_of(str))
    abstract: bool = attrib(validator=instance_of(bool), default=False)
    tokens: Tuple[Token, ...] = attrib(
        validator=deep_iterable(instance_of(Token)), converter=_to_tuple, default=()
    )
    _edges: List[Edge] = attrib(init=False, factory=list)
    _predecessor_ids: List[int] = attrib(init=False, factory=list)
    label_match: bool = attrib(default=False, init=False)
    span_match: bool = attrib(default=False, init=False)

    @property
    def edges(self) -> Tuple[Edge, ...]:
        """
        The outgoing edges of this node, in the order they were added.
        """
        return tuple(self._edges)

    @property
    def out_degree(self) -> int:
        return len(self._edges)

    @property
    def predecessor_ids(self) -> Tuple[int, ...]:
        """
        Ids of the nodes with an edge into this one, one entry per such edge.

        Use `SemanticGraph.predecessors` to get the nodes themselves.
        """
        return tuple(self._predecessor_ids)

    def add_edge(
        self, label: str, destination: "Node", *, post_label: Optional[str] = None
    ) -> Edge:
        """
        Add an outgoing edge from this node to *destination*.

        Both nodes must belong to the same graph;
        this is only meant to be called while a graph is being built.
        """
        edge = Edge(label, destination, post_label=post_label)
        self._edges.append(edge)
        # pylint:disable=protected-access
        destination._predecessor_ids.append(self.node_id)
        return edge

    def is_equivalent(self, other: "Node") -> bool:
        """
        Whether *other* should be considered the same node when comparing two graphs.

        This holds when both nodes have the same label.
        """
        return self.label == other.label

    def spans_agree(self, other: "Node") -> bool:
        """
        Whether both nodes span at least one token and span the same token forms in the same order.
        """
        return bool(self.tokens) and tuple(token.form for token in self.tokens) == tuple(
            token.form for token in other.tokens
        )

    def compare_node(self, other: "Node") -> None:
        """
        Mark the correspondence between this node and an equivalent node of another graph.

        Both nodes get *label_match*.
        Both get *span_match* if `spans_agree`.
        Each pair of outgoing edges with the same label
        whose destinations are equivalent gets *edge_match* on both sides.
        """
        self.label_match = True
        other.label_match = True
        if self.spans_agree(other):
            self.span_match = True
            other.span_match = True
        for edge in self._edges:
            for other_edge in other._edges:  # pylint:disable=protected-access
                if edge.label == other_edge.label and edge.destination.is_equivalent(
                    other_edge.destination
                ):
                    edge.edge_match = True
                    other_edge.edge_match = True

    def reset_matches(self) -> None:
        self.label_match = False
        self.span_match = False
        for edge in self._edges:
            edge.edge_match = False

    def __repr__(self) -> str:
        return f"n{self.node_id}:{self.label}{'*' if self.abstract else ''}"


@attrs(slots=True, eq=False, repr=False)
class SemanticGraph(Sized, Iterable[Node]):
    r"""
    A directed, labelled, token-anchored graph over one sentence.

    Build these with `from_json_dict` or `from_nodes`.
    The graph may contain cycles.

    The only mutable state of a graph is the match flags on its `Node`\ s and `Edge`\ s.
    Any analysis should begin with `reset_graph_matches`
    so that no flags from a previous, unrelated analysis leak into it.
    """

    graph_id: str = attrib(validator=instance_of(str))
    sentence: str = attrib(validator=instance_of(str))
    source: str = attrib(validator=instance_of(str))
    tokens: Tuple[Token, ...] = attrib(
        validator=deep_iterable(instance_of(Token)), converter=_to_tuple
    )
    nodes: Tuple[Node, ...] = attrib(
        validator=deep_iterable(instance_of(Node)), converter=_to_tuple
    )
    top_index: int = attrib(validator=instance_of(int), default=NO_TOP)

    def __attrs_post_init__(self) -> None:
        for (position, node) in enumerate(self.nodes):
            if node.node_id != position:
                raise RuntimeError(
                    f"Node ids must equal their positions, but node {node} is at {position}"
                )
            for edge in node.edges:
                if not self._owns(edge.destination):
                    raise RuntimeError(
                        f"Edge {edge} of {node} points to a node outside graph {self.graph_id}"
                    )
        if self.top_index != NO_TOP and not 0 <= self.top_index < len(self.nodes):
            raise RuntimeError(
                f"Top index {self.top_index} is out of range for {len(self.nodes)} nodes"
            )

    @staticmethod
    def from_json_dict(graph_record: Mapping[str, Any]) -> "SemanticGraph":
        """
        Build a graph from a parsed graph record.

        The record must have the *id*, *input*, *source*, *tokens*, *nodes* and *edges* fields
        and may have *tops*.
        A `GraphIngestionError` is raised if any required field is missing,
        or if an edge, anchor or top refers to something which does not exist.
        """
        try:
            graph_id = graph_record["id"]
            try:
                tokens = [Token.from_json_dict(record) for record in graph_record["tokens"]]
                duplicate_indices = [
                    index
                    for (index, count) in Counter(token.index for token in tokens).items()
                    if count > 1
                ]
                if duplicate_indices:
                    raise GraphIngestionError(
                        f"Token indices {duplicate_indices} are used by more than one token"
                    )
                tokens_by_index = immutabledict((token.index, token) for token in tokens)

                nodes = [
                    _node_from_json_dict(position, record, tokens_by_index)
                    for (position, record) in enumerate(graph_record["nodes"])
                ]

                for edge_record in graph_record["edges"]:
                    source_index = edge_record["source"]
                    target_index = edge_record["target"]
                    for index in (source_index, target_index):
                        if not isinstance(index, int) or not 0 <= index < len(nodes):
                            raise GraphIngestionError(
                                f"Edge {edge_record} refers to node {index}, "
                                f"but there are only {len(nodes)} nodes"
                            )
                    nodes[source_index].add_edge(
                        edge_record["label"],
                        nodes[target_index],
                        post_label=edge_record.get("post-label"),
                    )

                tops = graph_record.get("tops")
                top_index = tops[0] if tops else NO_TOP
                if top_index != NO_TOP and not 0 <= top_index < len(nodes):
                    raise GraphIngestionError(
                        f"Top {top_index} is out of range for {len(nodes)} nodes"
                    )

                return SemanticGraph(
                    graph_id=graph_id,
                    sentence=graph_record["input"],
                    source=graph_record["source"],
                    tokens=tokens,
                    nodes=nodes,
                    top_index=top_index,
                )
            except GraphIngestionError as e:
                raise GraphIngestionError(f"Cannot build graph {graph_id}: {e.msg}") from e
        except KeyError as e:
            raise GraphIngestionError(f"Graph record is missing required field {e}") from e
        except (TypeError, ValueError) as e:
            raise GraphIngestionError(f"Malformed graph record: {e}") from e

    @staticmethod
    def from_nodes(
        nodes: Iterable[Node],
        *,
        graph_id: str = "",
        top_index: int = NO_TOP,
        tokens: Iterable[Token] = (),
    ) -> "SemanticGraph":
        """
        Wrap already-connected nodes in a graph, e.g. to build a pattern for matching.
        """
        return SemanticGraph(
            graph_id=graph_id,
            sentence="",
            source="",
            tokens=tokens,
            nodes=nodes,
            top_index=top_index,
        )

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def top_node(self) -> Optional[Node]:
        if self.top_index == NO_TOP:
            return None
        return self.nodes[self.top_index]

    def find_node_by_id(self, node_id: Union[int, str]) -> Optional[Node]:
        """
        Get the node with the given id, or *None* if there is no such node.

        *node_id* may be an integer or a string such as *n3* or *3*,
        as typed by a user.
        """
        if isinstance(node_id, str):
            digits = node_id.strip()
            if digits.startswith("n"):
                digits = digits[1:]
            if not digits.isdecimal():
                return None
            node_id = int(digits)
        if isinstance(node_id, bool):
            return None
        if isinstance(node_id, int) and 0 <= node_id < len(self.nodes):
            return self.nodes[node_id]
        return None

    def predecessors(self, node: Node) -> Tuple[Node, ...]:
        return tuple(self.nodes[node_id] for node_id in node.predecessor_ids)

    def reset_graph_matches(self) -> None:
        """
        Set every match flag on every node and edge of this graph to *False*.
        """
        for node in self.nodes:
            node.reset_matches()

    def copy_as_digraph(self) -> DiGraph:
        """
        Get a `DiGraph` over the node ids of this graph.

        Nodes have the *label* attribute.
        Parallel edges between the same pair of nodes collapse into one,
        labelled with the full label of the first of them.
        """
        digraph = DiGraph()
        for node in self.nodes:
            digraph.add_node(node.node_id, **{LABEL: node.label})
        for node in self.nodes:
            for edge in node.edges:
                if not digraph.has_edge(node.node_id, edge.destination.node_id):
                    digraph.add_edge(
                        node.node_id, edge.destination.node_id, **{LABEL: edge.full_label}
                    )
        return digraph

    def text_dump(self) -> str:
        lines = [f"Graph {self.graph_id}: {self.sentence}", "Tokens:"]
        lines.extend(f"\t{token}" for token in self.tokens)
        lines.append("Nodes:")
        lines.extend(
            f"\t{node}{' (top)' if node.node_id == self.top_index else ''}"
            for node in self.nodes
        )
        lines.append("Edges:")
        lines.extend(f"\t{node}{edge}" for node in self.nodes for edge in node.edges)
        return "\n".join(lines)

    def _owns(self, node: Node) -> bool:
        return 0 <= node.node_id < len(self.nodes) and self.nodes[node.node_id] is node

    def __contains__(self, item) -> bool:
        return isinstance(item, Node) and self._owns(item)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __repr__(self) -> str:
        edges = [f"{node}{edge}" for node in self.nodes for edge in node.edges]
        return (
            f"SemanticGraph(id={self.graph_id}, nodes={str_list_limited(self.nodes, 10)}, "
            f"edges={str_list_limited(edges, 15)})"
        )


def _node_from_json_dict(
    position: int, node_record: Mapping[str, Any], tokens_by_index: Mapping[int, Token]
) -> Node:
    label = node_record["label"]
    spanned_indices: List[int] = []
    for anchor in node_record.get("anchors", ()):
        for token_index in range(anchor["from"], anchor["end"] + 1):
            if token_index not in tokens_by_index:
                raise GraphIngestionError(
                    f"Node {position} ({label}) is anchored to unknown token {token_index}"
                )
            spanned_indices.append(token_index)
    abstract = node_record.get("abstract")
    if abstract is None:
        abstract = not str(label).startswith(SURFACE_PREDICATE_PREFIX)
    return Node(
        position,
        label,
        abstract=abstract,
        tokens=[tokens_by_index[index] for index in sorted(set(spanned_indices))],
    )


def spanned_token_indices(node: Node) -> Sequence[int]:
    return tuple(token.index for token in node.tokens)
