"""Catalog ranking and reference resolution."""

from sectionforge.strategies.matching.ranker import LexicalRanker, RankingWeights, tokenize
from sectionforge.strategies.matching.resolver import ReferenceResolver, find_template, parse_references

__all__ = [
    "LexicalRanker",
    "RankingWeights",
    "ReferenceResolver",
    "find_template",
    "parse_references",
    "tokenize",
]
