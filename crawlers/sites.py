"""
Site pools for headline collection.

CRYPTO_SITES feeds the index scoring runs (shuffled, first five primary).
NEWS_SITES is the fixed list the news monitor walks every run.
"""
from constants import NewsCategory
from .base_crawler import SiteRule

CRYPTO = NewsCategory.CRYPTO.value
INDONESIA = NewsCategory.INDONESIA.value
GLOBAL = NewsCategory.GLOBAL.value
SPORTS = NewsCategory.SPORTS.value


# ============================================
# SHARED CRYPTO RULES
# ============================================

COINDESK = SiteRule(
    name="CoinDesk", category=CRYPTO,
    url="https://www.coindesk.com/",
    base_url="https://www.coindesk.com",
    wait_for='a[href*="/202"]',
    link_selector='a[href*="/202"]',
    min_len=25,
    excludes=("Subscribe", "Sign Up", "Newsletter"),
)

COINTELEGRAPH = SiteRule(
    name="CoinTelegraph", category=CRYPTO,
    url="https://cointelegraph.com/",
    base_url="https://cointelegraph.com",
    wait_for='a[href*="/news/"]',
    link_selector='a[href*="/news/"]',
)

DECRYPT = SiteRule(
    name="Decrypt", category=CRYPTO,
    url="https://decrypt.co/",
    base_url="https://decrypt.co",
    wait_for='a[href^="/3"]',
    link_selector='a[href^="/3"]',
    strategy="decrypt",
)

THE_BLOCK = SiteRule(
    name="The Block", category=CRYPTO,
    url="https://www.theblock.co/",
    base_url="https://www.theblock.co",
    wait_for='a[href*="/post/"]',
    link_selector='a[href*="/post/"]',
)

CRYPTO_SITES: tuple[SiteRule, ...] = (
    COINDESK,
    COINTELEGRAPH,
    DECRYPT,
    THE_BLOCK,
    SiteRule(
        name="BeInCrypto", category=CRYPTO,
        url="https://beincrypto.com/news/",
        base_url="https://beincrypto.com",
        wait_for='article a, a[href*="/2"]',
        link_selector="a[href]",
        strategy="beincrypto",
    ),
    SiteRule(
        name="CryptoSlate", category=CRYPTO,
        url="https://cryptoslate.com/top-news/",
        base_url="https://cryptoslate.com",
        wait_for="article a, .post-title a",
        link_selector='article a, .post-title a, a.news-item, a[href*="cryptoslate.com/"]',
        strategy="cryptoslate",
    ),
    SiteRule(
        name="Bitcoin Magazine", category=CRYPTO,
        url="https://bitcoinmagazine.com/",
        base_url="https://bitcoinmagazine.com",
        wait_for='a[href*="/news/"], a[href*="/markets/"]',
        link_selector='a[href*="/news/"], a[href*="/markets/"], a[href*="/business/"], a[href*="/technical/"]',
        strategy="section_slug",
    ),
    SiteRule(
        name="U.Today", category=CRYPTO,
        url="https://u.today/latest-cryptocurrency-news",
        base_url="https://u.today",
        wait_for="a[href]",
        link_selector="a[href]",
        strategy="u_today",
    ),
    SiteRule(
        name="NewsBTC", category=CRYPTO,
        url="https://www.newsbtc.com/",
        base_url="https://www.newsbtc.com",
        wait_for='a[href*="/bitcoin-news/"], a[href*="/altcoin/"]',
        link_selector='a[href*="/bitcoin-news/"], a[href*="/altcoin/"], a[href*="/news/"], a[href*="/analysis/"]',
        strategy="section_slug",
    ),
    SiteRule(
        name="CryptoPotato", category=CRYPTO,
        url="https://cryptopotato.com/crypto-news/",
        base_url="https://cryptopotato.com",
        wait_for='article a, a[href*="cryptopotato.com/"]',
        link_selector='article a, .entry-title a, a[href*="cryptopotato.com/"]',
        strategy="cryptopotato",
    ),
)


# ============================================
# NEWS MONITOR
# ============================================

NEWS_SITES: tuple[SiteRule, ...] = (
    # Indonesia
    SiteRule(
        name="CNN Indonesia", category=INDONESIA,
        url="https://www.cnnindonesia.com/",
        base_url="https://www.cnnindonesia.com",
        wait_for="article",
        title_selector="h2, h3",
        strategy="article_heading",
    ),
    SiteRule(
        name="CNBC Indonesia", category=INDONESIA,
        url="https://www.cnbcindonesia.com/",
        base_url="https://www.cnbcindonesia.com",
        wait_for="article",
        title_selector="h2",
        strategy="article_heading",
    ),

    # Global
    SiteRule(
        name="Reuters", category=GLOBAL,
        url="https://www.reuters.com/",
        base_url="https://www.reuters.com",
        wait_for='a[href*="/world/"], a[href*="/business/"]',
        link_selector='a[href*="/article/"], a[href*="/world/"], a[href*="/business/"], a[href*="/technology/"]',
        excludes=("Subscribe", "Sign"),
    ),
    SiteRule(
        name="Al Jazeera", category=GLOBAL,
        url="https://www.aljazeera.com/",
        base_url="https://www.aljazeera.com",
        wait_for='a[href*="/news/"]',
        link_selector='a[href*="/news/"], a[href*="/features/"], a[href*="/economy/"]',
        excludes=("More",),
    ),
    SiteRule(
        name="CNN International", category=GLOBAL,
        url="https://edition.cnn.com/",
        base_url="https://edition.cnn.com",
        wait_for='a[href*="/202"]',
        link_selector='a[href*="/202"]',
        min_len=25,
        excludes=("Ad Feedback",),
    ),
    SiteRule(
        name="Bloomberg", category=GLOBAL,
        url="https://www.bloomberg.com/",
        base_url="https://www.bloomberg.com",
        wait_for='a[href*="/news/"]',
        link_selector='a[href*="/news/"], a[href*="/articles/"]',
        min_len=25,
        excludes=("Subscribe",),
    ),

    # Crypto
    DECRYPT,
    COINTELEGRAPH,
    THE_BLOCK,
    SiteRule(
        name="Bitcoin Magazine", category=CRYPTO,
        url="https://bitcoinmagazine.com/",
        base_url="https://bitcoinmagazine.com",
        wait_for="a",
        link_selector='a[href*="/articles/"], a[href*="/business/"], a[href*="/markets/"]',
    ),
    SiteRule(
        name="Messari", category=CRYPTO,
        url="https://messari.io/news",
        base_url="https://messari.io",
        wait_for="a",
        link_selector='a[href*="/news/"], a[href*="/article/"]',
    ),

    # Sports
    SiteRule(
        name="ESPN", category=SPORTS,
        url="https://www.espn.com/",
        base_url="https://www.espn.com",
        wait_for='a[href*="/story/"]',
        link_selector='a[href*="/story/"], a[href*="/article/"]',
        excludes=("ESPN+", "Subscribe"),
    ),
    SiteRule(
        name="Sky Sports", category=SPORTS,
        url="https://www.skysports.com/",
        base_url="https://www.skysports.com",
        wait_for='a[href*="/news/"]',
        link_selector='a[href*="/news/"], a[href*="/story/"]',
        excludes=("Watch", "Live"),
    ),
    SiteRule(
        name="Goal.com", category=SPORTS,
        url="https://www.goal.com/en",
        base_url="https://www.goal.com",
        wait_for='a[href*="/news/"]',
        link_selector='a[href*="/news/"], a[href*="/lists/"]',
    ),
    SiteRule(
        name="Bleacher Report", category=SPORTS,
        url="https://bleacherreport.com/",
        base_url="https://bleacherreport.com",
        wait_for="a",
        link_selector='a[href*="/articles/"]',
    ),
    SiteRule(
        name="UEFA", category=SPORTS,
        url="https://www.uefa.com/",
        base_url="https://www.uefa.com",
        wait_for="a",
        link_selector='a[href*="/news/"], a[href*="/article/"]',
        min_len=15,
    ),
    SiteRule(
        name="MLB", category=SPORTS,
        url="https://www.mlb.com/news",
        base_url="https://www.mlb.com",
        wait_for='a[href*="/news/"]',
        link_selector='a[href*="/news/"]',
    ),
    SiteRule(
        name="NBA", category=SPORTS,
        url="https://www.nba.com/news",
        base_url="https://www.nba.com",
        wait_for='a[href*="/news/"]',
        link_selector='a[href*="/news/"], a[href*="/article/"]',
    ),
    SiteRule(
        name="Marca", category=SPORTS,
        url="https://www.marca.com/en/",
        base_url="https://www.marca.com",
        wait_for="a",
        link_selector='a[href*="/football/"], a[href*="/basketball/"], a[href*="/tennis/"]',
    ),
    SiteRule(
        name="Football365", category=SPORTS,
        url="https://www.football365.com/",
        base_url="https://www.football365.com",
        wait_for='a[href*="/news/"]',
        link_selector='a[href*="/news/"]',
    ),
)
