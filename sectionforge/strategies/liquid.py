"""Helpers for Liquid section files.

The structured configuration block of a section is the Liquid
``{% schema %} ... {% endschema %}`` tag holding a JSON document.
"""

import json
import logging
import re
import unicodedata
from typing import Any

logger = logging.getLogger(__name__)

SCHEMA_BLOCK_RE = re.compile(
    r"\{%-?\s*schema\s*-?%\}(?P<content>.*?)\{%-?\s*endschema\s*-?%\}",
    re.DOTALL | re.IGNORECASE,
)
SCHEMA_OPEN_RE = re.compile(r"\{%-?\s*schema\s*-?%\}", re.IGNORECASE)
SCHEMA_CLOSE_RE = re.compile(r"\{%-?\s*endschema\s*-?%\}", re.IGNORECASE)

COMMENT_METADATA_RE = {
    "name": re.compile(r"<!--\s*name:\s*(.+?)\s*-->", re.IGNORECASE),
    "tags": re.compile(r"<!--\s*tags:\s*(.+?)\s*-->", re.IGNORECASE),
    "description": re.compile(r"<!--\s*description:\s*(.+?)\s*-->", re.IGNORECASE),
}

_NAME_PREFIX_RE = re.compile(r"^(?:CUSTOM\s+|SG[-\s]+)", re.IGNORECASE)


def find_schema_blocks(body: str) -> list[re.Match[str]]:
    """Return every configuration block match in document order."""
    return list(SCHEMA_BLOCK_RE.finditer(body))


def parse_schema(body: str) -> dict[str, Any] | None:
    """Parse the first configuration block of a body.

    Args:
        body: Section source.

    Returns:
        The decoded JSON object, or None if the block is absent or invalid.
    """
    match = SCHEMA_BLOCK_RE.search(body)
    if not match:
        return None
    try:
        data = json.loads(match.group("content"))
    except json.JSONDecodeError as e:
        logger.debug(f"Invalid schema JSON: {e}")
        return None
    return data if isinstance(data, dict) else None


def render_schema_block(schema: dict[str, Any]) -> str:
    """Serialize a schema dict as a Liquid configuration block."""
    return "{% schema %}\n" + json.dumps(schema, indent=2, ensure_ascii=False) + "\n{% endschema %}"


def strip_schema_blocks(body: str) -> str:
    """Return the body with every configuration block removed."""
    return SCHEMA_BLOCK_RE.sub("", body)


def cut_unclosed_schema(body: str) -> str:
    """Drop a configuration opener that is never closed, and everything after it.

    Output truncated at the token limit often ends inside the JSON of a
    ``{% schema %}`` tag; left in place, the opener would swallow any block
    appended later.
    """
    tail_start = 0
    for match in SCHEMA_BLOCK_RE.finditer(body):
        tail_start = match.end()
    orphan = SCHEMA_OPEN_RE.search(body, tail_start)
    if orphan is None:
        return body
    logger.debug(f"Cutting unclosed configuration block at offset {orphan.start()}")
    return body[: orphan.start()].rstrip()


def extract_comment_metadata(body: str) -> dict[str, Any]:
    """Read ``<!-- name: ... -->`` style metadata comments.

    Returns:
        A dict with any of ``name``, ``tags`` (list) and ``description``.
    """
    metadata: dict[str, Any] = {}

    name_match = COMMENT_METADATA_RE["name"].search(body)
    if name_match:
        metadata["name"] = name_match.group(1).strip()

    tags_match = COMMENT_METADATA_RE["tags"].search(body)
    if tags_match:
        metadata["tags"] = [t.strip() for t in tags_match.group(1).split(",") if t.strip()]

    desc_match = COMMENT_METADATA_RE["description"].search(body)
    if desc_match:
        metadata["description"] = desc_match.group(1).strip()

    return metadata


def clean_section_name(name: str) -> str:
    """Remove the ``CUSTOM`` / ``SG-`` display prefixes from a section name."""
    return _NAME_PREFIX_RE.sub("", name.strip()).strip()


def slugify(value: str, max_length: int = 60) -> str:
    """Turn arbitrary text into a lowercase ASCII slug.

    Args:
        value: Text to convert.
        max_length: Maximum slug length.

    Returns:
        A slug of ``[a-z0-9-]``; ``"section"`` when nothing usable remains.
    """
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    slug = slug[:max_length].rstrip("-")
    return slug or "section"
