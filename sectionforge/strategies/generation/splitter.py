"""Splits raw generated text into normalized section artifacts.

Segmentation is a fallible heuristic parser. The heuristics are tried in
a fixed priority order that mirrors how models actually format multi
section answers:

1. cut right after every ``{% endschema %}``;
2. cut before lines opening a container (``<section``, ``<div``,
   ``{% comment %}``);
3. keep the whole text as one segment.

The first heuristic yielding more than one non-blank segment wins.
"""

import logging
import re
from dataclasses import dataclass

from sectionforge.core.exceptions import MalformedFragmentError
from sectionforge.interfaces.sink import GeneratedArtifact
from sectionforge.strategies.liquid import (
    COMMENT_METADATA_RE,
    SCHEMA_CLOSE_RE,
    clean_section_name,
    cut_unclosed_schema,
    find_schema_blocks,
    parse_schema,
    render_schema_block,
    slugify,
    strip_schema_blocks,
)

logger = logging.getLogger(__name__)

CONTAINER_OPENER_RE = re.compile(r"^(?=<section\b|<div\b|\{%-?\s*comment\s*-?%\})", re.MULTILINE | re.IGNORECASE)
FENCE_LINE_RE = re.compile(r"^\s*(```|~~~)[\w+-]*\s*$")
HTML_HEADING_RE = re.compile(r"<h[1-3][^>]*>(?P<text>.*?)</h[1-3]>", re.IGNORECASE | re.DOTALL)
MARKDOWN_HEADING_RE = re.compile(r"^#{1,3}\s+(?P<text>.+?)\s*#*\s*$", re.MULTILINE)
MARKUP_RE = re.compile(r"<[a-zA-Z!/]|\{%|\{\{")
LIQUID_OUTPUT_RE = re.compile(r"\{\{.*?\}\}|\{%.*?%\}", re.DOTALL)
TAG_RE = re.compile(r"<[^>]+>")

DESCRIPTION_MAX_LENGTH = 160


@dataclass(frozen=True)
class SegmentationResult:
    """Outcome of segmenting a raw response.

    Attributes:
        segments: Non-blank segments in document order.
        strategy: Heuristic that produced them.
        ok: False when the text held nothing to segment.
    """

    segments: tuple[str, ...]
    strategy: str
    ok: bool


def _non_blank(pieces: list[str]) -> list[str]:
    return [p for p in pieces if p.strip()]


def _cut_at(text: str, positions: list[int]) -> list[str]:
    bounds = [0, *positions, len(text)]
    return [text[start:end] for start, end in zip(bounds, bounds[1:])]


def strip_fences(text: str) -> str:
    """Remove Markdown code-fence lines and the prose around the markup.

    Leading and trailing lines without any markup (``Here is your
    section:``) are dropped; lines between markup lines are kept.
    """
    lines = [line for line in text.splitlines() if not FENCE_LINE_RE.match(line)]
    while lines and not MARKUP_RE.search(lines[0]):
        lines.pop(0)
    while lines and not MARKUP_RE.search(lines[-1]):
        lines.pop()
    return "\n".join(lines).strip()


def _plain_text(fragment: str) -> str:
    text = LIQUID_OUTPUT_RE.sub("", fragment)
    text = TAG_RE.sub("", text)
    return " ".join(text.split())


def find_heading(segment: str) -> str | None:
    """Return the first usable heading text of a segment, if any."""
    comment = COMMENT_METADATA_RE["name"].search(segment)
    if comment:
        return comment.group(1).strip()

    candidates = []
    for pattern in (HTML_HEADING_RE, MARKDOWN_HEADING_RE):
        for match in pattern.finditer(segment):
            text = _plain_text(match.group("text"))
            if text:
                candidates.append((match.start(), text))
                break
    if not candidates:
        return None
    return min(candidates)[1]


def synthesize_schema(name: str) -> dict:
    """Build a minimal configuration block for a segment without one."""
    return {
        "name": name,
        "tag": "section",
        "class": "section",
        "settings": [],
        "presets": [{"name": name}],
    }


class ResponseSplitter:
    """Turns raw generated text into artifacts with exactly one schema block.

    Attributes:
        min_fragment_length: Segments shorter than this are dropped as noise.
    """

    def __init__(self, min_fragment_length: int = 80) -> None:
        self.min_fragment_length = min_fragment_length

    def segment(self, raw_text: str) -> SegmentationResult:
        """Segment raw text with the first heuristic that finds several sections.

        Args:
            raw_text: Raw provider output.

        Returns:
            The segments and the heuristic that produced them.
        """
        if not raw_text or not raw_text.strip():
            return SegmentationResult((), "empty", False)

        by_schema = _non_blank(_cut_at(raw_text, [m.end() for m in SCHEMA_CLOSE_RE.finditer(raw_text)]))
        if len(by_schema) > 1:
            return SegmentationResult(tuple(by_schema), "schema-boundary", True)

        openers = [m.start() for m in CONTAINER_OPENER_RE.finditer(raw_text) if m.start() > 0]
        by_container = _non_blank(_cut_at(raw_text, openers))
        if len(by_container) > 1:
            return SegmentationResult(tuple(by_container), "container-markup", True)

        return SegmentationResult((raw_text,), "whole-text", True)

    def normalize(self, segment: str, index: int, original_query: str) -> GeneratedArtifact:
        """Normalize one segment into an artifact.

        Args:
            segment: Raw segment text.
            index: 1-based index among surviving segments.
            original_query: The caller's request, used for the description.

        Returns:
            The artifact, carrying exactly one configuration block.

        Raises:
            MalformedFragmentError: If the segment is noise.
        """
        text = cut_unclosed_schema(strip_fences(segment))
        if len(text) < self.min_fragment_length:
            raise MalformedFragmentError(index, f"shorter than {self.min_fragment_length} characters")
        if not MARKUP_RE.search(text):
            raise MalformedFragmentError(index, "no markup found")

        blocks = find_schema_blocks(text)
        schema: dict = {}
        kept_block: str | None = None
        for block in blocks:
            parsed = parse_schema(block.group(0))
            if parsed is not None:
                schema, kept_block = parsed, block.group(0)
                break

        if blocks:
            # the kept block is re-appended verbatim
            text = strip_schema_blocks(text).strip()

        raw_name = schema.get("name")
        if not isinstance(raw_name, str) or not raw_name.strip():
            raw_name = find_heading(segment) or f"Generated Section {index}"
        name = clean_section_name(raw_name) or f"Generated Section {index}"

        if kept_block is None:
            if blocks:
                logger.debug(f"Segment {index}: replacing invalid configuration block")
            kept_block = render_schema_block(synthesize_schema(name))

        description_match = COMMENT_METADATA_RE["description"].search(text)
        description = description_match.group(1).strip() if description_match else f"Generated for: {original_query}"

        return GeneratedArtifact(
            body=f"{text}\n\n{kept_block}\n" if text else f"{kept_block}\n",
            id=f"{slugify(name)}-{index}",
            name=name,
            description=description[:DESCRIPTION_MAX_LENGTH],
            source="ai",
        )

    def split(self, raw_text: str, original_query: str, max_results: int | None = None) -> list[GeneratedArtifact]:
        """Split raw text into at most `max_results` artifacts.

        Malformed segments are logged and skipped; persistence is left to
        the caller.
        """
        result = self.segment(raw_text)
        logger.info(f"Segmented response into {len(result.segments)} part(s) using {result.strategy}")

        artifacts: list[GeneratedArtifact] = []
        for segment in result.segments:
            if max_results is not None and len(artifacts) >= max_results:
                break
            try:
                artifacts.append(self.normalize(segment, len(artifacts) + 1, original_query))
            except MalformedFragmentError as e:
                logger.warning(str(e))
        return artifacts
