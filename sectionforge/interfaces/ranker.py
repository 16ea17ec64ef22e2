"""Abstract base class for catalog ranking strategies."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sectionforge.interfaces.catalog import Template


@dataclass(frozen=True)
class ScoredCandidate:
    """A template scored against one query.

    Attributes:
        template: The scored catalog entry.
        score: Accumulated relevance score.
        match_reason: Which scoring rules fired.
    """

    template: Template
    score: float
    match_reason: str


class BaseRanker(ABC):
    """Abstract base class for ranking strategies.

    Example:
        ```python
        class LexicalRanker(BaseRanker):
            def rank(self, query, catalog, exclude_ids=(), max_results=None):
                # Score and sort
                pass
        ```
    """

    @abstractmethod
    def rank(
        self,
        query: str,
        catalog: Sequence[Template],
        exclude_ids: Iterable[str] = (),
        max_results: int | None = None,
    ) -> list[ScoredCandidate]:
        """Score every template and return the matches.

        Args:
            query: Free-text query.
            catalog: Templates in catalog iteration order.
            exclude_ids: Identifiers removed before scoring.
            max_results: Optional truncation limit.

        Returns:
            Candidates with a positive score, by descending score; ties keep
            catalog order.
        """
        ...
