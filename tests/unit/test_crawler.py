import requests

from urlfinder.recon.crawler import Crawler  # type: ignore[import]
from urlfinder.recon.fetcher import FetchError  # type: ignore[import]

from tests.helpers.urlfinder_imports import (
    DedupSet,
    FetchResult,
    FuzzMode,
    Mode,
    RunConfig,
    make_ruleset,
)

ROOT_RELATIVE = r'(?<=href=")/[\w\-/]+'


class FakeFetcher:
    def __init__(self, pages):
        self.pages = pages
        self.fetched = []
        self.closed = False

    def fetch(self, url):
        self.fetched.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, requests.ConnectionError("unreachable"))
        status, body = page
        return FetchResult(url=url, status=status, content_type="text/html", body=body)

    def close(self):
        self.closed = True


def _crawler(pages, **config_options):
    config = RunConfig(threads=4, **config_options)
    ruleset = make_ruleset(url_patterns=[ROOT_RELATIVE], url_fuzz_paths=["/admin"])
    fetcher = FakeFetcher(pages)
    return Crawler(config, ruleset, fetcher=fetcher), fetcher


def test_crawl_extracts_normal_mode_urls():
    crawler, _ = _crawler({"http://t.test/page": (200, '<a href="/admin">')})

    result = crawler.crawl("http://t.test/page")

    assert result.urls == ("http://t.test/admin",)
    assert result.js_urls == ()
    assert crawler.crawled_count == 1


def test_crawl_skips_urls_outside_domain():
    crawler, fetcher = _crawler({"http://other.test/": (200, "")}, domain=r"^t\.test$")

    result = crawler.crawl("http://other.test/")

    assert result.status == 0
    assert result.urls == ()
    assert fetcher.fetched == []


def test_crawl_stops_fetching_after_max_count():
    pages = {"http://t.test/1": (200, ""), "http://t.test/2": (200, "")}
    crawler, fetcher = _crawler(pages, max_count=1)

    first = crawler.crawl("http://t.test/1")
    second = crawler.crawl("http://t.test/2")

    assert first.status == 200
    assert second.status == 0
    assert fetcher.fetched == ["http://t.test/1"]


def test_crawl_keeps_status_but_no_discoveries_when_status_filtered():
    crawler, _ = _crawler({"http://t.test/gone": (404, '<a href="/admin">')}, status_codes=(200,))

    result = crawler.crawl("http://t.test/gone")

    assert result.status == 404
    assert result.body == '<a href="/admin">'
    assert result.urls == ()


def test_run_collects_results_in_seed_order_and_skips_failures():
    pages = {
        "http://t.test/a": (200, '<a href="/admin">'),
        "http://t.test/b": (200, '<a href="/admin"><a href="/login">'),
    }
    crawler, _ = _crawler(pages)

    report = crawler.run(["http://t.test/a", "http://t.test/down", "http://t.test/b"])

    assert [result.url for result in report.results] == ["http://t.test/a", "http://t.test/b"]
    assert sorted(report.follow_ups) == ["http://t.test/admin", "http://t.test/login"]
    assert crawler.state.contains(DedupSet.VISITED, "http://t.test/b")


def test_run_drops_results_outside_status_filter():
    pages = {"http://t.test/ok": (200, ""), "http://t.test/missing": (404, "")}
    crawler, _ = _crawler(pages, status_codes=(200,))

    report = crawler.run(["http://t.test/ok", "http://t.test/missing"])

    assert [result.url for result in report.results] == ["http://t.test/ok"]


def test_run_adds_url_fuzz_candidates_for_404_pages():
    crawler, _ = _crawler({"http://t.test/a/b": (404, "")}, fuzz_mode=FuzzMode.URL_ONLY, mode=Mode.DEEP)

    report = crawler.run(["http://t.test/a/b"])

    assert sorted(report.follow_ups) == ["http://t.test/a/admin", "http://t.test/admin"]


def test_run_does_not_classify_skipped_results():
    crawler, _ = _crawler({}, domain=r"^t\.test$")

    report = crawler.run(["http://other.test/"])

    assert report.follow_ups == []
    assert report.results == []
    assert not crawler.state.contains(DedupSet.VISITED, "http://other.test/")


def test_close_closes_fetcher():
    crawler, fetcher = _crawler({})

    crawler.close()

    assert fetcher.closed is True
