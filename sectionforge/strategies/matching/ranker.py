"""Lexical ranker for the section catalog.

Two passes: a strict, multi-rule weighted pass for precision, then a
lenient identifier-segment overlap pass used only when the strict pass
scores every template at zero.
"""

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sectionforge.interfaces.catalog import Template
from sectionforge.interfaces.ranker import BaseRanker, ScoredCandidate
from sectionforge.strategies.liquid import clean_section_name, strip_schema_blocks
from sectionforge.strategies.matching.vocabulary import STOP_WORDS, categories_for

logger = logging.getLogger(__name__)

_EDGE_PUNCTUATION_RE = re.compile(r"^[^\w]+|[^\w]+$")
_SEGMENT_SPLIT_RE = re.compile(r"[-_]")


@dataclass(frozen=True)
class RankingWeights:
    """Rule weights, highest-precision first."""

    identifier: float = 30.0
    plural_identifier: float = 25.0
    category_synonym: float = 20.0
    tag: float = 10.0
    name: float = 10.0
    body: float = 8.0
    description: float = 5.0
    phrase_in_identifier: float = 15.0
    phrase_in_description: float = 10.0
    lenient_token_in_segment: float = 5.0
    lenient_segment_in_token: float = 3.0


def tokenize(query: str) -> list[str]:
    """Split a query into search tokens.

    Lowercases, splits on whitespace, trims edge punctuation and drops
    tokens of two characters or fewer and stop-words. If nothing remains,
    the whole lowercased query is the single token.

    Args:
        query: Free-text query.

    Returns:
        Distinct tokens in query order.
    """
    lowered = query.lower().strip()
    tokens: list[str] = []
    for raw in lowered.split():
        token = _EDGE_PUNCTUATION_RE.sub("", raw)
        if len(token) <= 2 or token in STOP_WORDS or token in tokens:
            continue
        tokens.append(token)
    if not tokens and lowered:
        return [lowered]
    return tokens


def _plural_variants(token: str) -> list[str]:
    variants = [token + "s"]
    if token.endswith("s") and len(token) > 3:
        variants.append(token[:-1])
    return variants


class LexicalRanker(BaseRanker):
    """Weighted keyword ranker.

    Example:
        ```python
        ranker = LexicalRanker()
        matches = ranker.rank("testimonial slider", catalog, max_results=5)
        ```
    """

    def __init__(self, weights: RankingWeights | None = None) -> None:
        self._weights = weights or RankingWeights()

    @property
    def weights(self) -> RankingWeights:
        return self._weights

    def rank(
        self,
        query: str,
        catalog: Sequence[Template],
        exclude_ids: Iterable[str] = (),
        max_results: int | None = None,
    ) -> list[ScoredCandidate]:
        """Rank the catalog against a query.

        Args:
            query: Free-text query.
            catalog: Templates in catalog iteration order.
            exclude_ids: Identifiers dropped before scoring.
            max_results: Optional truncation limit.

        Returns:
            Candidates with a positive score, by descending score. Python's
            sort is stable, so equal scores keep catalog order.
        """
        tokens = tokenize(query)
        if not tokens:
            return []

        excluded = {i.lower() for i in exclude_ids}
        pool = [t for t in catalog if t.id.lower() not in excluded]
        phrase = query.lower().strip()

        scored = [self._score_strict(t, tokens, phrase) for t in pool]
        if scored and all(c.score == 0 for c in scored):
            logger.debug(f"Strict pass found nothing for {query!r}; running lenient pass")
            scored = [self._score_lenient(t, tokens) for t in pool]

        matches = [c for c in scored if c.score > 0]
        matches.sort(key=lambda c: c.score, reverse=True)

        if max_results is not None:
            matches = matches[:max_results]

        logger.info(f"Ranked {len(pool)} sections for {query!r}: {len(matches)} matches")
        return matches

    def _score_strict(self, template: Template, tokens: list[str], phrase: str) -> ScoredCandidate:
        w = self._weights
        identifier = template.id.lower()
        name = clean_section_name(template.name).lower()
        description = template.description.lower()
        body = strip_schema_blocks(template.body).lower()
        tags = [t.lower() for t in template.tags]

        score = 0.0
        reasons: list[str] = []

        def hit(points: float, reason: str) -> None:
            nonlocal score
            score += points
            if reason not in reasons:
                reasons.append(reason)

        for token in tokens:
            if token in identifier:
                hit(w.identifier, "identifier")
            elif any(v in identifier for v in _plural_variants(token)):
                hit(w.plural_identifier, "identifier (plural)")

            if template.category in categories_for(token):
                hit(w.category_synonym, "category")

            if any(token in tag for tag in tags):
                hit(w.tag, "tags")

            if token in name:
                hit(w.name, "name")

            if token in body:
                hit(w.body, "body")

            if token in description:
                hit(w.description, "description")

        if phrase:
            if phrase in identifier:
                hit(w.phrase_in_identifier, "exact phrase")
            elif description and phrase in description:
                hit(w.phrase_in_description, "exact phrase")

        return ScoredCandidate(template=template, score=score, match_reason=", ".join(reasons))

    def _score_lenient(self, template: Template, tokens: list[str]) -> ScoredCandidate:
        w = self._weights
        segments = [s for s in _SEGMENT_SPLIT_RE.split(template.id.lower()) if len(s) >= 2]

        score = 0.0
        for token in tokens:
            for segment in segments:
                if token in segment:
                    score += w.lenient_token_in_segment
                elif segment in token:
                    score += w.lenient_segment_in_token

        reason = "partial identifier overlap" if score else ""
        return ScoredCandidate(template=template, score=score, match_reason=reason)
