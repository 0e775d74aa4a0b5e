"""
Headline Extractor - turn rendered HTML into headline candidates.

Most sites are described by a SiteRule and read by extract_links(). Sites whose
markup needs custom filtering register a named strategy with @strategy(name);
the rule then only carries the strategy name and its selector.
"""
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup, Tag

from .base_crawler import Headline, SiteRule

# Link texts that are site navigation, not headlines
NAV_WORDS = (
    "Schedule", "Standings", "Scores", "Playoffs", "Results", "Watch Live",
    "Sign In", "Log In", "Subscribe", "Download", "More News", "See All", "View All",
)
# Nav words only disqualify texts shorter than this
NAV_TEXT_MAX = 35
DATE_CONTAINERS = ["article", "li", "div", "section"]

Strategy = Callable[[BeautifulSoup, SiteRule], list[Headline]]
STRATEGIES: dict[str, Strategy] = {}


def strategy(name: str):
    """Register a custom extraction strategy under name."""
    def register(func: Strategy) -> Strategy:
        STRATEGIES[name] = func
        return func
    return register


# ============================================
# HELPERS
# ============================================

def clean_text(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return " ".join(text.split())


def anchor_text(a: Tag) -> str:
    return clean_text(a.get_text(" "))


def resolve_link(href: str, base_url: str) -> str:
    """Make a site-relative href absolute against base_url."""
    if href.startswith("http"):
        return href
    return base_url + ("" if href.startswith("/") else "/") + href


def is_nav_text(text: str) -> bool:
    return any(
        text == word or (len(text) < NAV_TEXT_MAX and word in text)
        for word in NAV_WORDS
    )


def find_published_at(a: Tag) -> Optional[str]:
    """Timestamp attribute from the closest article/li/div/section around a link."""
    container = a.find_parent(DATE_CONTAINERS)
    if container is None:
        return None
    el = container.select_one("time[datetime]") or container.select_one("[datetime], [data-date], [data-timestamp]")
    if el is None:
        return None
    return el.get("datetime") or el.get("data-date") or el.get("data-timestamp")


def parse_published(value: Optional[str]) -> Optional[datetime]:
    """Parse ISO-8601 or epoch (seconds or milliseconds) timestamps."""
    if not value:
        return None
    value = value.strip()
    try:
        if value.isdigit():
            ts = int(value)
            if ts > 10 ** 12:
                ts = ts / 1000
            return datetime.fromtimestamp(ts, tz=timezone.utc)
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def newest_first(headlines: Iterable[Headline]) -> list[Headline]:
    """Dated headlines newest first, then undated ones in page order."""
    def sort_key(h: Headline):
        dt = parse_published(h.published_at)
        return (0, -dt.timestamp()) if dt else (1, 0.0)
    return sorted(headlines, key=sort_key)


def _text_ok(text: str, low: int = 25, high: int = 200) -> bool:
    return bool(text) and low <= len(text) <= high


def _path_parts(href: str, base_url: str) -> list[str]:
    return [p for p in href.replace(base_url, "").split("/") if p]


def _slug(href: str, base_url: str) -> str:
    return href.replace(base_url, "").strip("/")


def _has_any(href: str, fragments: Iterable[str]) -> bool:
    return any(f in href for f in fragments)


# ============================================
# GENERIC EXTRACTOR
# ============================================

def extract_links(soup: BeautifulSoup, rule: SiteRule) -> list[Headline]:
    """
    Read headline links by selector, length bounds and exclusions.

    Texts are whitespace-collapsed; links are resolved against the rule's
    base_url and deduplicated.
    """
    results = []
    seen = set()

    for a in soup.select(rule.link_selector or "a[href]"):
        href = a.get("href")
        text = anchor_text(a)
        if not href or not text:
            continue
        if not rule.min_len <= len(text) <= rule.max_len:
            continue
        if any(ex in text for ex in rule.excludes) or is_nav_text(text):
            continue

        link = resolve_link(href, rule.base_url)
        if link in seen:
            continue
        seen.add(link)
        results.append(Headline(
            site=rule.name,
            title=text,
            link=link,
            published_at=find_published_at(a),
            category=rule.category,
        ))

    return results


def extract_headlines(html: str, rule: SiteRule) -> list[Headline]:
    """Extract candidates from a rendered page, newest first."""
    soup = BeautifulSoup(html, "html.parser")

    if rule.is_custom:
        if rule.strategy not in STRATEGIES:
            raise KeyError(f"Unknown extraction strategy: {rule.strategy}")
        candidates = STRATEGIES[rule.strategy](soup, rule)
    else:
        candidates = extract_links(soup, rule)

    return newest_first(candidates)


# ============================================
# CUSTOM STRATEGIES
# ============================================

def _headline(rule: SiteRule, title: str, link: str, published_at: Optional[str] = None) -> Headline:
    return Headline(site=rule.name, title=title, link=link, published_at=published_at, category=rule.category)


@strategy("decrypt")
def decrypt(soup: BeautifulSoup, rule: SiteRule) -> list[Headline]:
    """Article links start with a numeric id; price pages share that shape."""
    results, seen = [], set()
    for a in soup.select(rule.link_selector):
        href = a.get("href") or ""
        text = anchor_text(a)
        if not 20 < len(text) < 200 or "/price/" in href:
            continue
        link = resolve_link(href, rule.base_url)
        if link in seen:
            continue
        seen.add(link)
        results.append(_headline(rule, text, link, find_published_at(a)))
    return results


@strategy("beincrypto")
def beincrypto(soup: BeautifulSoup, rule: SiteRule) -> list[Headline]:
    """Articles live at a hyphenated slug; section pages do not."""
    skip = ("/author/", "/tag/", "/category/", "/learn/", "/price/", "/exchanges/")
    results, seen = [], set()
    for a in soup.select(rule.link_selector):
        href = a.get("href")
        if not href or _has_any(href, skip):
            continue
        parts = _path_parts(href, rule.base_url)
        if not parts or len(parts[0].split("-")) < 3:
            continue
        text = anchor_text(a)
        link = resolve_link(href, rule.base_url)
        if not _text_ok(text) or link in seen:
            continue
        seen.add(link)
        results.append(_headline(rule, text, link))
    return results


@strategy("cryptoslate")
def cryptoslate(soup: BeautifulSoup, rule: SiteRule) -> list[Headline]:
    skip = ("/author/", "/tag/", "/category/", "/coins/", "/exchanges/")
    results, seen = [], set()
    for a in soup.select(rule.link_selector):
        href = a.get("href")
        if not href or _has_any(href, skip):
            continue
        text = anchor_text(a)
        if not _text_ok(text):
            continue
        slug = _slug(href, rule.base_url)
        link = href if href.startswith("http") else f"{rule.base_url}/{slug}"
        if len(slug.split("-")) < 3 or link in seen:
            continue
        seen.add(link)
        results.append(_headline(rule, text, link))
    return results


@strategy("section_slug")
def section_slug(soup: BeautifulSoup, rule: SiteRule) -> list[Headline]:
    """Links of the form /<section>/<slug>; used by Bitcoin Magazine and NewsBTC."""
    results, seen = [], set()
    for a in soup.select(rule.link_selector):
        href = a.get("href")
        if not href:
            continue
        text = anchor_text(a)
        link = resolve_link(href, rule.base_url)
        if not _text_ok(text) or len(_path_parts(href, rule.base_url)) < 2 or link in seen:
            continue
        seen.add(link)
        results.append(_headline(rule, text, link))
    return results


@strategy("u_today")
def u_today(soup: BeautifulSoup, rule: SiteRule) -> list[Headline]:
    """Articles are single root-level slugs with at least four words."""
    results, seen = [], set()
    for a in soup.select(rule.link_selector):
        href = a.get("href")
        if not href:
            continue
        path = href.replace("https://u.today", "").replace("http://u.today", "")
        if not path.startswith("/"):
            path = "/" + path
        if (
            path == "/"
            or path.startswith("/latest-")
            or (path.startswith("/bitcoin-") and len(path.split("-")) < 4)
            or (path.startswith("/ethereum-") and len(path.split("-")) < 4)
        ):
            continue
        slug = path.strip("/")
        if not slug or "/" in slug or len(slug.split("-")) < 4:
            continue
        text = anchor_text(a)
        if not _text_ok(text) or slug in seen:
            continue
        seen.add(slug)
        results.append(_headline(rule, text, f"{rule.base_url}/{slug}"))
    return results


@strategy("cryptopotato")
def cryptopotato(soup: BeautifulSoup, rule: SiteRule) -> list[Headline]:
    skip = ("/author/", "/tag/", "/category/")
    results, seen = [], set()
    for a in soup.select(rule.link_selector):
        href = a.get("href")
        if not href or _has_any(href, skip):
            continue
        text = anchor_text(a)
        if not _text_ok(text):
            continue
        slug = _slug(href, rule.base_url)
        if not slug or len(slug.split("-")) < 3:
            continue
        if "/" in slug and "crypto-news" not in slug:
            continue
        link = href if href.startswith("http") else f"{rule.base_url}/{slug}"
        if link in seen:
            continue
        seen.add(link)
        results.append(_headline(rule, text, link))
    return results


@strategy("article_heading")
def article_heading(soup: BeautifulSoup, rule: SiteRule) -> list[Headline]:
    """Title from the heading inside each <article>, link from its first anchor."""
    heading_selector = rule.title_selector or "h2, h3"
    results, seen = [], set()
    for article in soup.select("article"):
        heading = article.select_one(heading_selector)
        a = article.select_one("a[href]")
        if heading is None or a is None:
            continue
        title = clean_text(heading.get_text(" "))
        if len(title) <= 10:
            continue
        link = resolve_link(a["href"], rule.base_url)
        if link in seen:
            continue
        seen.add(link)
        results.append(_headline(rule, title, link, find_published_at(a)))
    return results
