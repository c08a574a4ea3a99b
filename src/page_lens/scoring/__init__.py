"""Importance scoring."""

from page_lens.scoring.weights import KEY_SECTION_TERMS, TAG_IMPORTANCE, tag_weight
from page_lens.scoring.scorer import (
    ImportanceScorer,
    ScoreStats,
    has_key_terms,
    nodes_above,
    score_stats,
    top_nodes,
)

__all__ = [
    "KEY_SECTION_TERMS",
    "TAG_IMPORTANCE",
    "tag_weight",
    "ImportanceScorer",
    "ScoreStats",
    "has_key_terms",
    "nodes_above",
    "score_stats",
    "top_nodes",
]
