r"""
Searching a `SemanticGraph` for occurrences of a pattern.

A pattern is a `Node` together with the structure reachable along its outgoing edges,
usually taken from a small `SemanticGraph` built for the purpose.
An occurrence of the pattern is rooted at a node of the target graph with the same label
as the pattern root, and must contain, for every pattern edge,
an edge with the same label to a node with the same label,
under which the rest of the pattern matches recursively.

This is a containment search with backtracking, not a subgraph isomorphism solver:

* when several edges of a target node could satisfy a pattern edge,
  they are tried in stored order and the first one under which the rest of the pattern matches is kept;
* the same target node may be used for several pattern nodes.

The pattern must be finite along its outgoing edges (a tree or DAG);
a cyclic pattern recurses without bound.
Cycles in the target graph are fine.
"""
import logging
from typing import List, Tuple

from attr import attrib, attrs
from attr.validators import deep_iterable, instance_of
from immutablecollections.converter_utils import _to_tuple

from repgraph.graph import Edge, Node, SemanticGraph


@attrs(frozen=True, slots=True, eq=False)
class PatternOccurrence:
    r"""
    One successful embedding of a pattern into a target graph.
    """

    matched_nodes: Tuple[Node, ...] = attrib(
        validator=deep_iterable(instance_of(Node)), converter=_to_tuple
    )
    r"""
    The target nodes matched, root first,
    then the destinations of accepted edges in the order they were accepted.
    """
    matched_edges: Tuple[Edge, ...] = attrib(init=False)
    r"""
    The target edges connecting the matched nodes.

    Only nodes are recorded during the search, so these are recovered afterwards:
    for each matched node after the first,
    every edge of every node earlier in *matched_nodes* which lands exactly on it.
    """

    @matched_edges.default
    def _init_matched_edges(self) -> Tuple[Edge, ...]:
        edges: List[Edge] = []
        for (position, node) in enumerate(self.matched_nodes):
            if position == 0:
                continue
            for earlier_node in reversed(self.matched_nodes[:position]):
                for edge in earlier_node.edges:
                    if edge.destination is node:
                        edges.append(edge)
        return tuple(edges)

    @property
    def root(self) -> Node:
        return self.matched_nodes[0]

    def mark(self) -> None:
        """
        Set *label_match* on every matched node and *edge_match* on every matched edge.

        Nothing is cleared, so marking several occurrences accumulates their union.
        """
        for node in self.matched_nodes:
            node.label_match = True
        for edge in self.matched_edges:
            edge.edge_match = True


@attrs(frozen=True, slots=True)
class PatternMatcher:
    """
    Finds and marks the occurrences of the pattern rooted at *pattern_root* in target graphs.

    A matcher holds no search state, so it may be reused for any number of targets,
    one after the other.
    """

    pattern_root: Node = attrib(validator=instance_of(Node))

    @staticmethod
    def for_graph_top(pattern_graph: SemanticGraph) -> "PatternMatcher":
        """
        A matcher for the pattern rooted at the top node of *pattern_graph*.
        """
        top = pattern_graph.top_node
        if top is None:
            raise RuntimeError(
                f"Pattern graph {pattern_graph.graph_id} has no top node to match from"
            )
        return PatternMatcher(top)

    def graph_match(self, target: SemanticGraph) -> bool:
        """
        Mark every occurrence of the pattern in *target*.

        All flags on *target* are reset first.
        Each occurrence is then marked as described in `PatternOccurrence.mark`.

        Returns whether there was at least one occurrence.
        """
        target.reset_graph_matches()
        occurrences = self.occurrences(target)
        for occurrence in occurrences:
            occurrence.mark()
        logging.debug(
            "Pattern rooted at %s has %s occurrence(s) in graph %s",
            self.pattern_root,
            len(occurrences),
            target.graph_id,
        )
        return bool(occurrences)

    def occurrences(self, target: SemanticGraph) -> Tuple[PatternOccurrence, ...]:
        """
        Find the occurrences of the pattern in *target* without touching any flags.

        Every node of *target* with the label of the pattern root is tried as a root,
        in stored order, and yields at most one occurrence.
        """
        found = []
        for candidate in target.nodes:
            if candidate.label == self.pattern_root.label:
                # each attempt gets its own stack so nothing carries over between candidates
                matched_nodes = [candidate]
                if self.node_match(self.pattern_root, candidate, matched_nodes):
                    found.append(PatternOccurrence(matched_nodes))
        return tuple(found)

    def node_match(self, pattern: Node, test: Node, matched_nodes: List[Node]) -> bool:
        """
        Whether the pattern under *pattern* is contained in the graph under *test*.

        The caller must already have checked that the labels of *pattern* and *test* agree.
        Destinations of tentatively accepted edges are pushed onto *matched_nodes*
        and the stack is cut back to where it was if the recursion under them fails.
        On failure, *matched_nodes* may retain the nodes pushed for pattern edges which were
        satisfied before the failing one; the caller should discard it.
        """
        if pattern.out_degree == 0:
            return True
        if pattern.out_degree > test.out_degree:
            return False
        for pattern_edge in pattern.edges:
            pattern_destination = pattern_edge.destination
            pattern_edge_found = False
            for test_edge in test.edges:
                test_destination = test_edge.destination
                if (
                    pattern_edge.label == test_edge.label
                    and pattern_destination.label == test_destination.label
                ):
                    stack_depth = len(matched_nodes)
                    matched_nodes.append(test_destination)
                    if self.node_match(pattern_destination, test_destination, matched_nodes):
                        pattern_edge_found = True
                        break
                    # undo this destination and anything a failed recursion left above it
                    del matched_nodes[stack_depth:]
            if not pattern_edge_found:
                return False
        return True
