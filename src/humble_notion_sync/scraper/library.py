# Turning library tile text into books, and books into Bundles-DB relations.
from typing import Dict, List, Optional, Tuple

from humble_notion_sync.models import Bundle, RawBook

MAX_LINE = 500
NAV_WORDS = ("Menu", "Search")


def parse_library_tile(text: str, bundle_name: str = "") -> Optional[RawBook]:
    """First non-empty line is the title, second the author line.

    Tiles with a single line, or whose "title" is navigation chrome or
    implausibly short/long, are not books.
    """
    lines = [ln.strip() for ln in (text or "").split("\n")]
    lines = [ln for ln in lines if ln and len(ln) < MAX_LINE]
    if len(lines) < 2:
        return None

    title, author = lines[0], lines[1]
    if not (3 < len(title) < 200):
        return None
    if any(w in title for w in NAV_WORDS):
        return None
    if author.lower().startswith("by "):
        author = author[3:].strip()
    return RawBook(title=title, author=author, bundle_name=(bundle_name or "").strip())


def dedupe_books(books: List[RawBook]) -> List[RawBook]:
    """Keep the first tile per (title, author)."""
    unique: Dict[Tuple[str, str], RawBook] = {}
    for book in books:
        unique.setdefault((book.title, book.author), book)
    return list(unique.values())


def match_bundle(bundle_name: str, bundles: List[Bundle]) -> Optional[Bundle]:
    """Find the bundle whose Notion name contains, or is contained in, ``bundle_name``.

    Comparison is case-insensitive and bundles with an empty name never match.
    """
    needle = (bundle_name or "").strip().lower()
    if not needle:
        return None
    for b in bundles:
        hay = (b.bundle_name or b.name or "").strip().lower()
        if not hay:
            continue
        if needle in hay or hay in needle:
            return b
    return None
