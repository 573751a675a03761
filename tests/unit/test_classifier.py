import logging

from urlfinder.recon.classifier import DiscoveryClassifier  # type: ignore[import]
from urlfinder.recon.extractor import Extractor  # type: ignore[import]

from tests.helpers.urlfinder_imports import (
    CrawlResult,
    DedupSet,
    DedupState,
    FetchResult,
    FuzzMode,
    Mode,
    make_ruleset,
)


def _classifier(state=None, **overrides):
    options = {"url_fuzz_paths": ["/admin"], "js_fuzz_paths": ["config.js"]}
    options.update(overrides)
    return DiscoveryClassifier.from_ruleset(state or DedupState(), make_ruleset(**options))


def test_end_to_end_new_then_already_visited():
    ruleset = make_ruleset(url_patterns=[r'(?<=href=")/[\w\-/]+'])
    fetch = FetchResult(url="http://t.test/page", status=200, body='<a href="/admin">')
    result = Extractor(ruleset).extract_result(fetch, Mode.NORMAL)
    classifier = DiscoveryClassifier.from_ruleset(DedupState(), ruleset)

    assert result.urls == ("http://t.test/admin",)
    assert classifier.process(result, Mode.NORMAL) == ["http://t.test/admin"]
    assert classifier.process(result, Mode.NORMAL) == []


def test_process_marks_result_url_visited():
    state = DedupState()
    classifier = _classifier(state)

    classifier.process(CrawlResult(url="http://t.test/", status=200), Mode.NORMAL)

    assert state.contains(DedupSet.VISITED, "http://t.test/")


def test_duplicates_within_one_result_are_returned_once():
    classifier = _classifier()
    result = CrawlResult(url="http://t.test/", status=200, urls=("http://t.test/a", "http://t.test/a"))

    assert classifier.process(result, Mode.NORMAL) == ["http://t.test/a"]


def test_js_urls_only_classified_in_deep_modes():
    state = DedupState()
    classifier = _classifier(state)
    result = CrawlResult(url="http://t.test/", status=200, js_urls=("http://t.test/app.js",))

    assert classifier.process(result, Mode.NORMAL) == []
    assert not state.contains(DedupSet.JS_VISITED, "http://t.test/app.js")
    assert classifier.process(result, Mode.DEEP) == ["http://t.test/app.js"]
    assert classifier.process(result, Mode.DEEP_SAFE) == []


def test_sensitive_info_is_reported_only_in_deep_safe(caplog):
    classifier = _classifier()
    result = CrawlResult(url="http://t.test/", status=200, sensitive_info=("token='x'",))

    with caplog.at_level(logging.WARNING):
        assert classifier.process(result, Mode.DEEP) == []
    assert "sensitive information" not in caplog.text

    with caplog.at_level(logging.WARNING):
        assert classifier.process(result, Mode.DEEP_SAFE) == []
    assert "Found sensitive information in http://t.test/" in caplog.text


def test_url_fuzz_requires_404():
    classifier = _classifier()
    ok = CrawlResult(url="http://t.test/a/b", status=200)
    missing = CrawlResult(url="http://t.test/a/c", status=404)

    assert classifier.process(ok, Mode.NORMAL, FuzzMode.URL_ONLY) == []
    assert sorted(classifier.process(missing, Mode.NORMAL, FuzzMode.URL_ONLY)) == [
        "http://t.test/a/admin",
        "http://t.test/admin",
    ]


def test_fuzz_candidates_are_deduplicated_across_calls():
    classifier = _classifier()
    first = CrawlResult(url="http://t.test/a/c", status=404)
    second = CrawlResult(url="http://t.test/a/d", status=404)

    classifier.process(first, Mode.NORMAL, FuzzMode.URL_ONLY)

    assert classifier.process(second, Mode.NORMAL, FuzzMode.URL_ONLY) == []


def test_js_fuzz_runs_regardless_of_status_and_mode():
    classifier = _classifier()
    result = CrawlResult(url="http://t.test/", status=200, js_urls=("http://t.test/js/app.js",))

    candidates = classifier.process(result, Mode.NORMAL, FuzzMode.JS_ONLY)

    assert sorted(candidates) == ["http://t.test/config.js", "http://t.test/js/config.js"]


def test_both_fuzz_modes_combine():
    classifier = _classifier()
    result = CrawlResult(url="http://t.test/x/y", status=404, js_urls=("http://t.test/app.js",))

    candidates = classifier.process(result, Mode.NORMAL, FuzzMode.BOTH)

    assert candidates == ["http://t.test/admin", "http://t.test/x/admin", "http://t.test/config.js"]


def test_fuzz_set_is_independent_from_visited():
    state = DedupState()
    state.try_insert(DedupSet.VISITED, "http://t.test/admin")
    classifier = _classifier(state)

    candidates = classifier.process(CrawlResult(url="http://t.test/z", status=404), Mode.NORMAL, FuzzMode.URL_ONLY)

    assert candidates == ["http://t.test/admin"]
