"""Category inference from section identifiers."""

import re

# Ordered: the first rule whose substring occurs in the cleaned identifier wins.
CATEGORY_RULES: tuple[tuple[str, str], ...] = (
    ("testimonial", "testimonial"),
    ("review", "testimonial"),
    ("announcement", "announcement"),
    ("hero", "hero"),
    ("banner", "hero"),
    ("faq", "faq"),
    ("accordion", "faq"),
    ("product", "product"),
    ("collection", "collection"),
    ("gallery", "gallery"),
    ("image", "gallery"),
    ("slider", "slider"),
    ("carousel", "slider"),
    ("slideshow", "slider"),
    ("video", "video"),
    ("countdown", "countdown"),
    ("timer", "countdown"),
    ("newsletter", "newsletter"),
    ("subscribe", "newsletter"),
    ("form", "form"),
    ("contact", "form"),
    ("feature", "feature"),
    ("benefit", "feature"),
    ("header", "header"),
    ("nav", "header"),
    ("footer", "footer"),
    ("blog", "blog"),
    ("article", "blog"),
    ("trust", "trust"),
    ("badge", "trust"),
    ("social", "social"),
)

DEFAULT_CATEGORY = "custom"

_IDENTIFIER_PREFIX_RE = re.compile(r"^(?:sg|ss|custom)[-_\s]+")


def clean_identifier(identifier: str) -> str:
    """Lowercase an identifier and strip vendor prefixes and whitespace."""
    return _IDENTIFIER_PREFIX_RE.sub("", identifier.strip().lower()).strip()


def infer_category(identifier: str) -> str:
    """Infer a category from an identifier.

    Args:
        identifier: Raw identifier, e.g. ``sg-testimonials-3``.

    Returns:
        The category name, or ``custom`` when no rule matches.
    """
    cleaned = clean_identifier(identifier)
    for needle, category in CATEGORY_RULES:
        if needle in cleaned:
            return category
    return DEFAULT_CATEGORY
