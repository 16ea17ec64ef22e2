"""Fixed vocabularies used by the lexical ranker."""

STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "the", "i", "me", "my", "we", "our", "you", "your",
        "need", "want", "give", "get", "show", "looking", "for", "with",
        "and", "that", "this", "some", "please", "can", "could", "would",
        "like", "make", "create", "build", "add", "have", "has", "into",
        "from", "which", "where", "should", "section", "sections", "page",
    }
)

# Category -> words that signal it in a query.
CATEGORY_SYNONYMS: dict[str, tuple[str, ...]] = {
    "hero": ("hero", "landing", "header", "intro", "banner", "headline", "main"),
    "testimonial": ("testimonial", "review", "feedback", "rating", "quote", "customer"),
    "feature": ("feature", "benefit", "advantage", "highlight"),
    "announcement": ("announcement", "alert", "notice", "bar"),
    "header": ("header", "navigation", "nav", "menu", "navbar"),
    "gallery": ("gallery", "image", "photo", "picture", "media"),
    "product": ("product", "item", "shop", "shopping", "merchandise", "catalog"),
    "collection": ("collection", "category", "group"),
    "faq": ("faq", "question", "answer", "accordion", "help", "support"),
    "form": ("form", "contact", "input", "field"),
    "newsletter": ("newsletter", "email", "subscribe", "signup", "subscription"),
    "video": ("video", "youtube", "vimeo"),
    "slider": ("slider", "carousel", "slideshow", "slide", "swiper"),
    "countdown": ("countdown", "timer", "clock", "deadline"),
    "trust": ("trust", "badge", "security", "guarantee", "certificate"),
    "social": ("social", "share", "facebook", "twitter", "instagram"),
    "blog": ("blog", "article", "post", "news"),
    "footer": ("footer", "bottom", "links"),
}


def _build_token_index() -> dict[str, frozenset[str]]:
    index: dict[str, set[str]] = {}
    for category, words in CATEGORY_SYNONYMS.items():
        index.setdefault(category, set()).add(category)
        for word in words:
            index.setdefault(word, set()).add(category)
    return {word: frozenset(categories) for word, categories in index.items()}


_TOKEN_CATEGORIES = _build_token_index()


def categories_for(token: str) -> frozenset[str]:
    """Return the categories a query token points at.

    Plural tokens are looked up in their singular form as well
    (``reviews`` -> ``review``).
    """
    found = _TOKEN_CATEGORIES.get(token)
    if found is None and token.endswith("s"):
        found = _TOKEN_CATEGORIES.get(token[:-1])
    return found or frozenset()
