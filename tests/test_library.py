from humble_notion_sync.models import Bundle, RawBook
from humble_notion_sync.scraper.library import dedupe_books, match_bundle, parse_library_tile


def test_tile_title_and_author():
    book = parse_library_tile("  Clean Code \nby Robert C. Martin\nDownload", "Programming Essentials")

    assert book == RawBook(title="Clean Code", author="Robert C. Martin", bundle_name="Programming Essentials")
    assert book.display_name == "Clean Code by Robert C. Martin"


def test_tile_without_author_line_is_not_a_book():
    assert parse_library_tile("Only a title") is None
    assert parse_library_tile("") is None


def test_navigation_chrome_is_not_a_book():
    assert parse_library_tile("Search Library\nsomething") is None
    assert parse_library_tile("abc\nshort title") is None


def test_dedupe_books_keeps_first_per_title_and_author():
    books = [
        RawBook(title="A", author="X", bundle_name="first"),
        RawBook(title="A", author="X", bundle_name="second"),
        RawBook(title="A", author="Y"),
    ]

    assert [b.bundle_name for b in dedupe_books(books)] == ["first", ""]


def test_match_bundle_is_case_insensitive_both_ways():
    bundles = [
        Bundle(id="1", name="Humble Book Bundle: Python by No Starch"),
        Bundle(id="2", name="Humble Tech Book Bundle: Linux", bundle_name="Linux"),
    ]

    assert match_bundle("python by no starch", bundles).id == "1"
    assert match_bundle("Humble Book Bundle: Python by No Starch Press", bundles).id == "1"
    assert match_bundle("LINUX", bundles).id == "2"
    assert match_bundle("Unrelated", bundles) is None


def test_empty_names_never_match():
    bundles = [Bundle(id="1", name="")]

    assert match_bundle("", bundles) is None
    assert match_bundle("Anything", bundles) is None
