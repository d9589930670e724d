# Keyword rules for guessing what a Humble bundle contains from its title.
from typing import Dict, List, Tuple

VIDEO_GAMES = "Video Games"
BOOKS = "Books"
COMICS = "Comics/Manga"
RPG = "RPG/Tabletop"
SOFTWARE = "Software"
MUSIC = "Music"

CATEGORIES: List[str] = [VIDEO_GAMES, BOOKS, COMICS, RPG, SOFTWARE, MUSIC]

# (substrings, categories granted). Evaluated in order; comics and RPG
# bundles are mostly PDFs, so they also count as books.
RULES: List[Tuple[Tuple[str, ...], Tuple[str, ...]]] = [
    (("book bundle:", "tech book bundle:"), (BOOKS,)),
    (("comic", "manga"), (COMICS, BOOKS)),
    (("rpg bundle:", "vtt bundle:", "tabletop", "3d printable"), (RPG, BOOKS)),
    (("software bundle:", "learn to code", "data science", "level up your python"), (SOFTWARE,)),
    (("music bundle",), (MUSIC,)),
]


def _matches(name: str, needles: Tuple[str, ...]) -> bool:
    return any(n in name for n in needles)


def categorize_bundle(title: str) -> List[str]:
    """Every category the title qualifies for, once each; Video Games if none."""
    name = (title or "").lower()
    out: List[str] = []
    for needles, granted in RULES:
        if _matches(name, needles):
            for cat in granted:
                if cat not in out:
                    out.append(cat)
    return out or [VIDEO_GAMES]


def primary_category(title: str) -> str:
    """The first rule that matches wins; anything unmatched is a game bundle."""
    name = (title or "").lower()
    for needles, granted in RULES:
        if _matches(name, needles):
            return granted[0]
    return VIDEO_GAMES


def group_by_primary_category(titles: List[str]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {cat: [] for cat in CATEGORIES}
    for title in titles:
        groups[primary_category(title)].append(title)
    for cat in groups:
        groups[cat].sort()
    return groups
