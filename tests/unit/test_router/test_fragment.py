"""Unit tests for deep link parsing."""

import pytest

from delivery_dashboard.router.fragment import (
    ParsedFragment,
    fragment_for_version,
    parse_fragment,
)


class TestParseFragment:
    """Tests for parse_fragment."""

    @pytest.mark.parametrize(
        "fragment",
        [
            "",
            "#",
            "#foobar",
            "#pollbot/thunderbird",
            "#pollbot/thunderbird/",
            "pollbot/thunderbird/60.0",
            "#poll-bot/thunderbird/60.0",
        ],
    )
    def test_malformed_fragment_returns_none(self, fragment: str) -> None:
        """Malformed fragments do not match."""
        assert parse_fragment(fragment) is None

    @pytest.mark.parametrize(
        "fragment",
        ["#pollbot/foobar/50.0", "#pollbot/unknown_product/1.0", "#pollbot/firefox/1"],
    )
    def test_unknown_product_returns_none(self, fragment: str) -> None:
        """Products outside the whitelist do not match."""
        assert parse_fragment(fragment) is None

    def test_matching_fragment(self) -> None:
        """A well-formed fragment yields service, product and version."""
        assert parse_fragment("#pollbot/thunderbird/60.0") == ParsedFragment(
            service="pollbot", product="thunderbird", version="60.0"
        )

    def test_trailing_slash_allowed(self) -> None:
        """A trailing slash is optional."""
        parsed = parse_fragment("#pollbot/thunderbird/60.0/")
        assert parsed is not None
        assert parsed.version == "60.0"

    def test_version_with_non_slash_characters(self) -> None:
        """Versions may contain any non-slash characters."""
        parsed = parse_fragment("#pollbot/thunderbird/61.0b3+build-1")
        assert parsed is not None
        assert parsed.version == "61.0b3+build-1"

    def test_custom_product_list(self) -> None:
        """The whitelist can be overridden."""
        parsed = parse_fragment("#pollbot/devedition/70.0b2", products=("devedition",))
        assert parsed is not None
        assert parsed.product == "devedition"
        assert parse_fragment("#pollbot/thunderbird/60.0", products=()) is None

    def test_non_ascii_word_characters_rejected(self) -> None:
        """Service and product are plain ASCII word tokens."""
        assert parse_fragment("#pollböt/thunderbird/60.0") is None


class TestFragmentForVersion:
    """Tests for fragment_for_version."""

    def test_builds_parseable_fragment(self) -> None:
        """Built fragments parse back to the same selection."""
        fragment = fragment_for_version("thunderbird", "82.0a1")
        assert fragment == "#pollbot/thunderbird/82.0a1"
        parsed = parse_fragment(fragment)
        assert parsed is not None
        assert (parsed.product, parsed.version) == ("thunderbird", "82.0a1")
