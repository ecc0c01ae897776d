"""
Analysis of semantic dependency graphs (e.g. DMRS) for visual highlighting.

Start with `repgraph.graph.SemanticGraph`,
then see `repgraph.graph.matcher.PatternMatcher`.
"""
