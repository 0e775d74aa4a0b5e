import pytest

from crawlers import SiteRule, extract_headlines
from crawlers.extractor import clean_text, is_nav_text, parse_published, resolve_link

RULE = SiteRule(
    name="Example",
    category="crypto",
    url="https://ex.com/",
    base_url="https://ex.com",
    link_selector="a[href]",
    min_len=30,
    excludes=("Sponsored",),
)


def test_clean_text():
    assert clean_text("  Bitcoin \n\t climbs   again ") == "Bitcoin climbs again"


def test_resolve_link():
    assert resolve_link("/news/a", "https://ex.com") == "https://ex.com/news/a"
    assert resolve_link("news/b", "https://ex.com") == "https://ex.com/news/b"
    assert resolve_link("https://other.com/x", "https://ex.com") == "https://other.com/x"


def test_nav_text():
    assert is_nav_text("Sign In to read premium stories")
    assert is_nav_text("Subscribe")
    assert not is_nav_text("Why traders who Subscribe to every rally keep losing money")


def test_generic_extractor_rules():
    html = """
    <a href="/news/a">  Bitcoin   climbs above record high as ETF inflows surge </a>
    <a href="/short">Short title</a>
    <a href="/login">Sign In to read premium stories</a>
    <a href="/ad">Sponsored: the best crypto exchange of the year</a>
    <a href="/news/a">Bitcoin climbs above record high as ETF inflows surge</a>
    <a href="news/b">Ethereum developers schedule the next network upgrade</a>
    <a href="https://other.com/c">Solana validators vote on a new fee market design</a>
    """

    headlines = extract_headlines(html, RULE)

    assert [h.link for h in headlines] == [
        "https://ex.com/news/a",
        "https://ex.com/news/b",
        "https://other.com/c",
    ]
    assert headlines[0].title == "Bitcoin climbs above record high as ETF inflows surge"
    assert headlines[0].site == "Example"
    assert headlines[0].category == "crypto"


def test_max_length_bound():
    rule = SiteRule(name="E", category="crypto", url="https://ex.com/", base_url="https://ex.com", max_len=40)
    html = '<a href="/a">' + "word " * 20 + "</a>"
    assert extract_headlines(html, rule) == []


def test_dated_headlines_sorted_newest_first():
    html = """
    <article><time datetime="2026-10-01T10:00:00Z"></time>
      <a href="/old">Older story about bitcoin miners and hashrate</a></article>
    <article><a href="/undated">Undated story about stablecoin regulation news</a></article>
    <article><time datetime="2026-10-02T10:00:00Z"></time>
      <a href="/new">Newer story about ether staking withdrawals</a></article>
    """

    links = [h.link.rsplit("/", 1)[-1] for h in extract_headlines(html, RULE)]

    assert links == ["new", "old", "undated"]


def test_parse_published_formats():
    assert parse_published("2026-10-02T10:00:00Z").year == 2026
    assert parse_published("1700000000").year == 2023
    assert parse_published("1700000000000").year == 2023
    assert parse_published("not a date") is None
    assert parse_published(None) is None


def test_article_heading_strategy():
    rule = SiteRule(
        name="Headings", category="global",
        url="https://ex.com/", base_url="https://ex.com",
        strategy="article_heading",
    )
    html = """
    <article><h2>Central bank holds rates steady again</h2><a href="/p/1">Read</a></article>
    <article><h2>Tiny</h2><a href="/p/2">Read</a></article>
    <article><h3>Markets rally after the jobs report</h3><a href="/p/1">Read</a></article>
    """

    headlines = extract_headlines(html, rule)

    assert [(h.title, h.link) for h in headlines] == [
        ("Central bank holds rates steady again", "https://ex.com/p/1"),
    ]


def test_decrypt_strategy_skips_price_pages():
    rule = SiteRule(
        name="Decrypt", category="crypto",
        url="https://decrypt.co/", base_url="https://decrypt.co",
        link_selector='a[href^="/"]', strategy="decrypt",
    )
    html = """
    <a href="/310001/bitcoin-etf-flows-turn-positive">Bitcoin ETF flows turn positive for the week</a>
    <a href="/price/bitcoin">Bitcoin price today and market overview page</a>
    """

    headlines = extract_headlines(html, rule)

    assert [h.link for h in headlines] == ["https://decrypt.co/310001/bitcoin-etf-flows-turn-positive"]


def test_unknown_strategy():
    rule = SiteRule(name="X", category="crypto", url="https://ex.com/", strategy="missing")
    with pytest.raises(KeyError):
        extract_headlines("<a href='/a'>x</a>", rule)


@pytest.mark.parametrize("strategy, path", [
    ("decrypt", "/bitcoin-hits-new-high-today"),
    ("beincrypto", "/bitcoin-hits-new-high-today"),
    ("cryptoslate", "/bitcoin-hits-new-high-today"),
    ("cryptopotato", "/bitcoin-hits-new-high-today"),
    ("section_slug", "/news/bitcoin-hits-new-high-today"),
])
def test_strategies_dedupe_relative_and_absolute_links(strategy, path):
    rule = SiteRule(
        name="Example", category="crypto",
        url="https://ex.com/", base_url="https://ex.com",
        link_selector="a[href]", strategy=strategy,
    )
    html = f"""
    <a href="{path}">Bitcoin hits a new high today as ETF demand grows</a>
    <a href="https://ex.com{path}">Same story linked again from the trending sidebar</a>
    """

    headlines = extract_headlines(html, rule)

    assert [h.link for h in headlines] == [f"https://ex.com{path}"]
    assert headlines[0].title == "Bitcoin hits a new high today as ETF demand grows"
