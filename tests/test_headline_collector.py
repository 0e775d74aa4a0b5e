import asyncio
import random

from crawlers import HeadlineCollector, SiteRule
from conftest import FakeRenderer


def make_sites(n):
    return [
        SiteRule(name=f"Site{i}", category="crypto", url=f"https://site{i}.com/", base_url=f"https://site{i}.com")
        for i in range(n)
    ]


def page(*links):
    return "".join(
        f'<a href="{link}">Market update number {i} for crypto traders today</a>'
        for i, link in enumerate(links)
    )


class InOrder(random.Random):
    """Keeps the pool in declaration order so primaries are the first sites."""

    def shuffle(self, x):
        pass


def collector(renderer, sites, target=5, rng=None):
    return HeadlineCollector(renderer, sites, target=target, site_delay=0, rng=rng or InOrder())


def test_split_pool():
    sites = make_sites(7)
    primary, backup = collector(FakeRenderer(), sites, rng=random.Random(7)).split_pool()

    assert len(primary) == 5
    assert len(backup) == 2
    assert {s.name for s in primary + backup} == {s.name for s in sites}


def test_backups_untouched_when_primaries_deliver():
    sites = make_sites(7)
    renderer = FakeRenderer({s.url: page(f"/story-{s.name}") for s in sites})

    headlines = asyncio.run(collector(renderer, sites).collect())

    assert len(headlines) == 5
    assert len(renderer.calls) == 5


def test_backups_fill_failed_primaries():
    sites = make_sites(7)
    pages = {s.url: page(f"/story-{s.name}") for s in sites}
    pages[sites[0].url] = RuntimeError("session refused")
    pages[sites[1].url] = ""
    renderer = FakeRenderer(pages)

    headlines = asyncio.run(collector(renderer, sites).collect())

    assert len(headlines) == 5
    assert len({h.link for h in headlines}) == 5
    assert renderer.urls == [s.url for s in sites]


def test_links_are_never_repeated():
    sites = make_sites(4)
    # Every site shows the same story first; the second link is unique per site
    renderer = FakeRenderer({
        s.url: page("https://shared.com/same-story", f"/own-{s.name}") for s in sites
    })

    headlines = asyncio.run(collector(renderer, sites, target=4).collect())
    links = [h.link for h in headlines]

    assert len(headlines) == 4
    assert len(set(links)) == 4
    assert links.count("https://shared.com/same-story") == 1


def test_candidates_swallow_failures():
    site = make_sites(1)[0]
    renderer = FakeRenderer({site.url: RuntimeError("boom")})

    assert asyncio.run(collector(renderer, [site]).candidates(site)) == []


def test_fewer_working_sites_than_target():
    sites = make_sites(3)
    renderer = FakeRenderer({sites[0].url: page("/only-one")})

    headlines = asyncio.run(collector(renderer, sites).collect())

    assert [h.link for h in headlines] == ["https://site0.com/only-one"]
