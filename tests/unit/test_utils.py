import pytest

from urlfinder.recon.utils import (  # type: ignore[import]
    UrlError,
    is_domain_match,
    normalize_url,
)

BASE = "http://example.com/a/b"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("c.js", "http://example.com/a/c.js"),
        ("/x", "http://example.com/x"),
        ("//cdn.example.com/y", "http://cdn.example.com/y"),
        ("http://other.com/z", "http://other.com/z"),
        ("https://other.com/z", "https://other.com/z"),
    ],
)
def test_normalize_url_resolution_table(raw, expected):
    assert normalize_url(raw, BASE) == expected


def test_normalize_url_relative_to_directory_base():
    assert normalize_url("app.js", "https://example.com/static/") == "https://example.com/static/app.js"


def test_normalize_url_relative_to_bare_host():
    assert normalize_url("app.js", "https://example.com") == "https://example.com/app.js"


def test_normalize_url_keeps_port():
    assert normalize_url("/login", "http://example.com:8080/home") == "http://example.com:8080/login"


def test_normalize_url_rejects_base_without_host():
    with pytest.raises(UrlError):
        normalize_url("/x", "not a url")


def test_normalize_url_absolute_ignores_bad_base():
    assert normalize_url("http://other.com/z", "not a url") == "http://other.com/z"


def test_is_domain_match_uses_host():
    assert is_domain_match("https://api.example.com/v1", r"example\.com$") is True
    assert is_domain_match("https://example.org/path/example.com", r"example\.com$") is False
    assert is_domain_match("not a url", r".*") is False
