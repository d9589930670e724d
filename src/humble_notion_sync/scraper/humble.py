"""
Humble Bundle storefront driven through Playwright (Chromium, sync API).

There is no public API for purchase history, so everything here reads the
rendered pages. All selectors live in ``SELECTORS``; when Humble changes its
markup, this module is the only place to touch.

Flow:
  1) /login          fill username/password, dismiss consent, optional email code
  2) /home/purchases paginated table, "next" button until it stops advancing
  3) /home/library   infinite scroll, then read item tiles
"""

from __future__ import annotations

import datetime
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from humble_notion_sync.errors import ScrapeError
from humble_notion_sync.models import RawBook, RawPurchase
from humble_notion_sync.scraper.library import parse_library_tile
from humble_notion_sync.scraper.storefront import Storefront
from humble_notion_sync.utils.logging_utils import get_logger
from humble_notion_sync.utils.settings import Settings, StorefrontCredentials

BASE_URL = "https://www.humblebundle.com"
LOGIN_URL = f"{BASE_URL}/login"
PURCHASES_URL = f"{BASE_URL}/home/purchases"
LIBRARY_URL = f"{BASE_URL}/home/library"

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]

NAV_TIMEOUT_MS = 60_000
VERIFY_TIMEOUT_MS = 300_000  # operator types the emailed code in the browser

log = get_logger("humble")


@dataclass(frozen=True)
class Selectors:
    username: str = 'input[name="username"]'
    password: str = 'input[name="password"]'
    submit: str = 'button[type="submit"]'
    consent: str = 'button:has-text("I Consent")'
    verify_code: str = 'input[placeholder="ENTER CODE"], input[name="code"]'
    purchase_row: str = ".row.js-row, div.row"
    purchase_name: str = ".product-name"
    purchase_date: str = ".order-placed"
    purchase_total: str = ".total"
    library_container: str = ".js-subproducts-holder"
    library_tiles: Tuple[str, ...] = (
        ".subproduct-selector",
        '[class*="subproduct"]',
        ".js-subproduct",
        "[data-product-name]",
    )


SELECTORS = Selectors()

# Rightmost enabled button that looks like "next"; clicks it and reports success
NEXT_PAGE_JS = """
() => {
  let nextButton = null;
  for (const btn of document.querySelectorAll('button')) {
    const label = (btn.getAttribute('aria-label') || '').toLowerCase();
    const html = btn.innerHTML || '';
    if (label.includes('next') || label.includes('forward') ||
        html.includes('>') || html.includes('chevron') || html.includes('arrow')) {
      nextButton = btn;
    }
  }
  if (nextButton && !nextButton.disabled && !nextButton.classList.contains('disabled')) {
    nextButton.click();
    return true;
  }
  return false;
}
"""

CLOSEST_BUNDLE_JS = """
(el) => {
  const header = el.closest('[data-human-name]') || el.closest('[data-bundle-title]');
  if (!header) return '';
  return header.getAttribute('data-human-name') || header.getAttribute('data-bundle-title') || '';
}
"""

ANALYZE_LIBRARY_JS = """
() => {
  const selectors = ['.item', '.book', '.product', '.subproduct', '.title',
    '[class*="book"]', '[class*="item"]', '[class*="product"]',
    '[data-product]', '[data-book]', '[data-item]'];
  const containers = [];
  for (const selector of selectors) {
    const elements = document.querySelectorAll(selector);
    if (elements.length > 0) {
      containers.push({
        selector,
        count: elements.length,
        sample_text: (elements[0].textContent || '').trim().substring(0, 100),
      });
    }
  }
  const classNames = new Set();
  document.querySelectorAll('[class]').forEach(el => {
    String(el.className).split(' ').forEach(c => { if (c) classNames.add(c); });
  });
  return {
    possible_containers: containers,
    class_names: Array.from(classNames)
      .filter(n => ['book', 'item', 'product', 'title'].some(k => n.includes(k)))
      .sort(),
    sample_html: document.body.innerHTML.substring(0, 5000),
  };
}
"""


def _text(element: Any, selector: str) -> str:
    found = element.query_selector(selector)
    if found is None:
        return ""
    return (found.text_content() or "").strip()


class HumbleStorefront(Storefront):
    def __init__(
        self,
        page: Page,
        debug_dir: Path = Path("debug"),
        selectors: Selectors = SELECTORS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.page = page
        self.debug_dir = debug_dir
        self.sel = selectors
        self._sleep = sleep

    def _pause(self, seconds: float) -> None:
        # Fixed waits for client-side rendering to settle
        self._sleep(seconds)

    # ---- login ----

    def dismiss_consent(self, attempts: int = 3) -> bool:
        """Click the privacy consent button until it is gone; True when gone."""
        for attempt in range(attempts):
            button = self.page.query_selector(self.sel.consent)
            if button is None:
                return True
            log.info("🍪 Consent dialog found (attempt %d), clicking...", attempt + 1)
            button.click()
            self._pause(2)
        gone = self.page.query_selector(self.sel.consent) is None
        if not gone:
            log.warning("Consent dialog still present, continuing anyway")
        return gone

    def login(self, credentials: StorefrontCredentials) -> None:
        page = self.page
        log.info("🔐 Logging in to Humble Bundle...")
        page.goto(LOGIN_URL, wait_until="networkidle", timeout=NAV_TIMEOUT_MS)
        page.wait_for_selector(self.sel.username, timeout=15_000)
        self._pause(2)
        self.dismiss_consent()

        page.fill(self.sel.username, credentials.email)
        self._pause(0.5)
        page.fill(self.sel.password, credentials.password)
        self._pause(0.5)
        page.click(self.sel.submit)

        try:
            page.wait_for_load_state("networkidle", timeout=NAV_TIMEOUT_MS)
        except PlaywrightTimeoutError:
            log.warning("Navigation timeout after submit; checking current URL")

        if page.query_selector(self.sel.verify_code) is not None:
            log.info("📧 Email verification required: enter the code in the browser window (5 min)")
            try:
                page.wait_for_url(lambda url: "/home" in url or "/purchases" in url, timeout=VERIFY_TIMEOUT_MS)
            except PlaywrightTimeoutError as e:
                raise ScrapeError("Email verification timed out; verify and run again") from e
        elif "/login" in page.url:
            raise ScrapeError("Still on the login page; check HUMBLE_EMAIL / HUMBLE_PASSWORD")

        log.info("✅ Logged in")

    # ---- purchases ----

    def _extract_purchase_rows(self) -> List[RawPurchase]:
        rows: List[RawPurchase] = []
        for row in self.page.query_selector_all(self.sel.purchase_row):
            name = _text(row, self.sel.purchase_name)
            date_text = _text(row, self.sel.purchase_date)
            if not (name and date_text):
                continue
            rows.append(RawPurchase(
                name=name,
                date_text=date_text,
                price_text=_text(row, self.sel.purchase_total) or "$0.00",
            ))
        return rows

    def _click_next_page(self) -> bool:
        return bool(self.page.evaluate(NEXT_PAGE_JS))

    def list_purchases(self) -> List[RawPurchase]:
        page = self.page
        log.info("📦 Navigating to purchases page...")
        page.goto(PURCHASES_URL, wait_until="networkidle", timeout=NAV_TIMEOUT_MS)
        self._pause(2)
        self.dismiss_consent(attempts=1)

        # Lazy-loaded table
        page.evaluate("window.scrollTo(0, 500)")
        self._pause(2)
        try:
            page.wait_for_selector(self.sel.purchase_row, timeout=20_000)
        except PlaywrightTimeoutError:
            log.warning("Timeout waiting for purchase rows; reading what is there")

        purchases: List[RawPurchase] = []
        previous_names: Optional[List[str]] = None
        page_no = 1
        while True:
            rows = self._extract_purchase_rows()
            log.info("📖 Page %d: %d purchases", page_no, len(rows))

            # The next button can stay enabled on the last page
            names = sorted(r.name for r in rows)
            if page_no > 1 and rows and names == previous_names:
                log.info("   Same rows as previous page; reached the end")
                break
            previous_names = names
            purchases.extend(rows)

            try:
                clicked = self._click_next_page()
            except PlaywrightError as e:
                # Usually a navigation tore down the page mid-click; keep what we have
                log.warning("Next-page click failed (%s); treating as last page", e)
                break
            if not clicked:
                log.info("   No more pages")
                break
            page_no += 1
            self._pause(4)
            try:
                page.wait_for_selector(self.sel.purchase_row, timeout=10_000)
            except PlaywrightTimeoutError:
                log.warning("Page %d never rendered rows; stopping", page_no)
                break

        if not purchases:
            log.warning("No purchases found; the page structure might have changed")
            self.save_debug_artifacts("purchases-empty")
        return purchases

    # ---- library ----

    def _scroll_to_end(self, max_rounds: int = 15, stable_rounds: int = 3) -> None:
        previous = 0
        unchanged = 0
        for _ in range(max_rounds):
            self.page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
            self._pause(3)
            height = self.page.evaluate("document.body.scrollHeight")
            if height == previous:
                unchanged += 1
                if unchanged >= stable_rounds:
                    break
            else:
                unchanged = 0
            previous = height

    def _open_library(self) -> None:
        page = self.page
        log.info("📖 Loading library...")
        page.goto(LIBRARY_URL, wait_until="networkidle", timeout=NAV_TIMEOUT_MS)
        self._pause(5)
        try:
            page.wait_for_selector(self.sel.library_container, timeout=30_000)
        except PlaywrightTimeoutError:
            log.warning("Library container not found, continuing anyway")
        self._pause(5)

    def list_library_books(self) -> List[RawBook]:
        self._open_library()
        log.info("📜 Scrolling to load all products...")
        self._scroll_to_end()
        self._pause(3)

        for selector in self.sel.library_tiles:
            elements = self.page.query_selector_all(selector)
            log.info("   • %s: %d elements", selector, len(elements))
            books: List[RawBook] = []
            for el in elements:
                book = parse_library_tile(el.inner_text(), el.evaluate(CLOSEST_BUNDLE_JS))
                if book is not None:
                    books.append(book)
            if books:
                return books

        log.warning("No books found; the page structure may have changed")
        self.save_debug_artifacts("library-empty")
        return []

    def analyze_library(self) -> Dict[str, Any]:
        self._open_library()
        return self.page.evaluate(ANALYZE_LIBRARY_JS)

    # ---- debugging ----

    def save_debug_artifacts(self, name: str) -> Optional[Path]:
        """Screenshot + HTML of the current page; failures here are only logged."""
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        self.debug_dir.mkdir(parents=True, exist_ok=True)
        shot = self.debug_dir / f"humble_{name}_{timestamp}.png"
        try:
            self.page.screenshot(path=str(shot), full_page=True)
            (self.debug_dir / f"humble_{name}_{timestamp}.html").write_text(self.page.content(), encoding="utf-8")
        except PlaywrightError as e:
            log.warning("Failed to save debug artifacts: %s", e)
            return None
        log.info("📸 Debug screenshot saved: %s", shot)
        return shot


@contextmanager
def open_storefront(settings: Settings) -> Iterator[HumbleStorefront]:
    """Launch Chromium, yield a storefront on a fresh page, always close the browser."""
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=settings.HUMBLE_HEADLESS, args=BROWSER_ARGS)
        try:
            context = browser.new_context(viewport={"width": 1280, "height": 800}, user_agent=USER_AGENT)
            store = HumbleStorefront(context.new_page(), debug_dir=Path(settings.DEBUG_DIR))
            try:
                yield store
            except PlaywrightError as e:
                store.save_debug_artifacts("error")
                raise ScrapeError(f"Browser automation failed: {e}") from e
            except ScrapeError:
                store.save_debug_artifacts("error")
                raise
        finally:
            browser.close()
