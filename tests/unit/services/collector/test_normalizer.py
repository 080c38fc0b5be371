"""Unit tests for URL normalization and hashing."""

import pytest

from hotnews.services.collector.normalizer import (
    content_hash,
    djb2_hex,
    feed_external_id,
    normalize_url,
)


class TestNormalizeUrl:
    """Tests for normalize_url()."""

    @pytest.mark.unit
    def test_strips_tracking_params(self):
        url = (
            "https://example.com/a"
            "?utm_source=hn&utm_medium=social&utm_campaign=x&ref=tw&source=rss"
        )
        assert normalize_url(url) == "https://example.com/a"

    @pytest.mark.unit
    def test_keeps_other_params(self):
        url = "https://Example.com/Path/?utm_source=x&id=1"
        assert normalize_url(url) == "https://example.com/path/?id=1"

    @pytest.mark.unit
    def test_strips_trailing_slash(self):
        assert normalize_url("https://example.com/post/") == "https://example.com/post"

    @pytest.mark.unit
    def test_bare_host(self):
        assert normalize_url("https://example.com") == "https://example.com"

    @pytest.mark.unit
    def test_lowercases(self):
        assert normalize_url("HTTPS://EXAMPLE.COM/News") == "https://example.com/news"

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://Example.COM:443/A/B/", "https://example.com/a/b"),
            ("http://example.com:80/post", "http://example.com/post"),
            ("https://example.com:8443/post", "https://example.com:8443/post"),
            ("http://example.com:443/post", "http://example.com:443/post"),
        ],
    )
    def test_default_port_dropped(self, url, expected):
        assert normalize_url(url) == expected

    @pytest.mark.unit
    def test_non_ascii_path_is_percent_encoded(self):
        assert normalize_url("https://example.com/caf\u00e9 menu") == (
            "https://example.com/caf%c3%a9%20menu"
        )

    @pytest.mark.unit
    def test_encoded_path_is_left_alone(self):
        assert normalize_url("https://example.com/caf%C3%A9") == "https://example.com/caf%c3%a9"

    @pytest.mark.unit
    def test_userinfo_kept(self):
        assert normalize_url("https://user@example.com:443/x") == "https://user@example.com/x"

    @pytest.mark.unit
    def test_unparseable_input_is_lowercased(self):
        assert normalize_url("Not A URL") == "not a url"

    @pytest.mark.unit
    def test_idempotent(self):
        once = normalize_url("https://example.com/a/?ref=x&q=1")
        assert normalize_url(once) == once


class TestHashes:
    """Tests for djb2_hex(), content_hash() and feed_external_id()."""

    @pytest.mark.unit
    def test_djb2_known_values(self):
        assert djb2_hex("") == "1505"
        assert djb2_hex("a") == "2b5c4"

    @pytest.mark.unit
    def test_djb2_is_lowercase_hex(self):
        digest = djb2_hex("huggingface/transformers:v4.40.0")
        assert digest == digest.lower()
        int(digest, 16)

    @pytest.mark.unit
    def test_djb2_handles_long_input(self):
        # Wraps at 32 bits instead of growing without bound
        digest = djb2_hex("x" * 10_000)
        assert int(digest, 16) <= 2**31

    @pytest.mark.unit
    def test_content_hash_ignores_punctuation_case_and_tracking(self):
        first = content_hash("OpenAI: GPT-5 is here!", "https://example.com/a?utm_source=hn")
        second = content_hash("openai gpt5 is here", "https://EXAMPLE.com/a/")
        assert first == second

    @pytest.mark.unit
    def test_content_hash_ignores_default_port(self):
        assert content_hash("Title", "https://example.com:443/a/b/") == content_hash(
            "Title", "https://example.com/a/b"
        )

    @pytest.mark.unit
    def test_content_hash_differs_for_different_urls(self):
        assert content_hash("Same title", "https://a.example.com/x") != content_hash(
            "Same title", "https://b.example.com/x"
        )

    @pytest.mark.unit
    def test_content_hash_deterministic(self):
        assert content_hash("Title", "https://example.com") == content_hash(
            "Title", "https://example.com"
        )

    @pytest.mark.unit
    def test_feed_external_id_known_values(self):
        assert feed_external_id("a") == "2p"
        assert feed_external_id("ab") == "2e9"

    @pytest.mark.unit
    def test_feed_external_id_is_base36(self):
        external_id = feed_external_id("https://openai.com/blog/some-long-post-title")
        assert external_id.isalnum()
        assert external_id == external_id.lower()
        int(external_id, 36)
