"""Library maintenance for imported section files.

Imported sections carry vendor copyright comments and a foreign ``ss-``
prefix. Processing strips the comments, rewrites the prefix to ``sg-``,
prefixes the schema name with ``SG-`` and renames the file to match.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from sectionforge.strategies.liquid import SCHEMA_BLOCK_RE, render_schema_block

logger = logging.getLogger(__name__)

VENDOR_COMMENT_PATTERNS = [
    re.compile(r"\{%-?\s*comment\s*-?%\}(?:(?!\{%-?\s*endcomment).)*?" + marker + r".*?\{%-?\s*endcomment\s*-?%\}", re.IGNORECASE | re.DOTALL)
    for marker in ("Copyright", "Section Store", "Unauthorized copying")
] + [
    re.compile(r"<!--(?:(?!-->).)*?" + marker + r".*?-->", re.IGNORECASE | re.DOTALL)
    for marker in ("Copyright", "Section Store")
]

_PREFIX_RE = re.compile(r"(?<![A-Za-z0-9])(ss)(?=[-_])", re.IGNORECASE)
_SCHEMA_NAME_RE = re.compile(r'"name"\s*:\s*"(?P<name>[^"]*)"')
_FOREIGN_NAME_PREFIX_RE = re.compile(r"^SS-\s*", re.IGNORECASE)


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of processing one section file.

    Attributes:
        path: Where the processed file now lives.
        renamed: Whether the file was renamed.
        changed: Whether the content changed.
    """

    path: Path
    renamed: bool
    changed: bool


def remove_vendor_comments(content: str) -> str:
    """Strip copyright and vendor comment blocks."""
    for pattern in VENDOR_COMMENT_PATTERNS:
        content = pattern.sub("", content)
    return content.strip()


def rewrite_prefixes(text: str) -> str:
    """Rewrite ``ss-``/``SS_`` style prefixes to ``sg-``/``SG_``, keeping case."""

    def _replace(match: re.Match[str]) -> str:
        return "SG" if match.group(1).isupper() else "sg"

    return _PREFIX_RE.sub(_replace, text)


def prefixed_name(name: str) -> str:
    if name.startswith(("SG-", "SG ")):
        return name
    return f"SG-{_FOREIGN_NAME_PREFIX_RE.sub('', name).strip()}"


def prefix_schema_name(content: str) -> str:
    """Prefix the configuration block's ``name`` with ``SG-``.

    Falls back to a textual rewrite of the first ``"name"`` key when the
    block is not valid JSON.
    """
    match = SCHEMA_BLOCK_RE.search(content)
    if not match:
        return content

    try:
        schema = json.loads(match.group("content"))
    except json.JSONDecodeError:
        block = _SCHEMA_NAME_RE.sub(
            lambda m: f'"name": "{prefixed_name(m.group("name"))}"',
            match.group(0),
            count=1,
        )
        return content[: match.start()] + block + content[match.end() :]

    if not isinstance(schema, dict) or not isinstance(schema.get("name"), str) or not schema["name"]:
        return content

    schema["name"] = prefixed_name(schema["name"])
    return content[: match.start()] + render_schema_block(schema) + content[match.end() :]


def process_section_file(path: Path) -> ProcessResult:
    """Clean one section file in place, renaming it if needed.

    Args:
        path: The ``.liquid`` file.

    Returns:
        The processing result.

    Raises:
        OSError: If the file cannot be read or written.
    """
    original = path.read_text(encoding="utf-8")
    content = remove_vendor_comments(original)
    content = rewrite_prefixes(content)
    content = prefix_schema_name(content)

    target = path.with_name(rewrite_prefixes(path.name))
    renamed = target != path
    if renamed and target.exists():
        logger.warning(f"Not renaming {path.name}: {target.name} already exists")
        target, renamed = path, False

    target.write_text(content, encoding="utf-8")
    if renamed:
        path.unlink()
        logger.info(f"Processed and renamed: {path.name} -> {target.name}")
    else:
        logger.info(f"Processed: {path.name}")

    return ProcessResult(path=target, renamed=renamed, changed=content != original)


def process_directory(sections_dir: Path) -> dict[str, int]:
    """Process every ``.liquid`` file of a directory.

    Returns:
        Counts for ``processed``, ``renamed`` and ``failed`` files.

    Raises:
        FileNotFoundError: If the directory does not exist.
    """
    if not sections_dir.is_dir():
        raise FileNotFoundError(f"Sections directory not found: {sections_dir}")

    counts = {"processed": 0, "renamed": 0, "failed": 0}
    files = sorted(
        p for p in sections_dir.iterdir()
        if p.is_file() and p.suffix == ".liquid" and not p.name.startswith(".")
    )
    logger.info(f"Found {len(files)} section files to process")

    for path in files:
        try:
            result = process_section_file(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error processing {path.name}: {e}")
            counts["failed"] += 1
            continue
        counts["processed"] += 1
        if result.renamed:
            counts["renamed"] += 1

    logger.info(
        f"Processing complete: {counts['processed']} processed, "
        f"{counts['renamed']} renamed, {counts['failed']} failed"
    )
    return counts
