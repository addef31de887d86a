"""Tests for the Browse-first / Finding-fallback resolver."""

from unittest.mock import Mock

import pytest
from comicsold.datasources.ebay_api import EbayAPIClient
from comicsold.errors import AuthError, ConfigError, UpstreamError, ValidationError
from comicsold.resolver import SoldListingsResolver, validate_query


@pytest.fixture
def token_cache():
    cache = Mock()
    cache.acquire_token.return_value = "tok"
    return cache


@pytest.fixture
def client():
    return Mock(spec=EbayAPIClient)


@pytest.fixture
def resolver(token_cache, client):
    return SoldListingsResolver(token_cache, client)


def _many_browse(n):
    return {
        "itemSummaries": [
            {"title": f"Spawn #{i}", "price": {"value": "5.00", "currency": "USD"}}
            for i in range(n)
        ]
    }


@pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
def test_blank_title_rejected_before_network(resolver, token_cache, client, title):
    with pytest.raises(ValidationError):
        resolver.resolve(title, 10)
    token_cache.acquire_token.assert_not_called()
    client.search_browse.assert_not_called()
    client.search_finding.assert_not_called()


@pytest.mark.parametrize("limit", [0, 51, -3, "abc", None, 2.5, True])
def test_limit_out_of_range_rejected(resolver, client, limit):
    with pytest.raises(ValidationError):
        resolver.resolve("Spawn", limit)
    client.search_browse.assert_not_called()


def test_invalid_mode_rejected(resolver):
    with pytest.raises(ValidationError):
        resolver.resolve("Spawn", 10, mode="scrape")


def test_validate_query_cleans_values():
    assert validate_query("  Saga #1 ", "7", " Browse ") == ("Saga #1", 7, "browse")
    assert validate_query("Saga", 1, "") == ("Saga", 1, None)


@pytest.mark.parametrize("limit", [1, 3, 10, 50])
def test_items_never_exceed_limit(resolver, client, limit):
    client.search_browse.return_value = _many_browse(60)

    result = resolver.resolve("Spawn", limit)

    assert len(result.items) <= limit
    assert result.source == "browse"


def test_primary_success_uses_browse(resolver, client, token_cache, browse_payload):
    client.search_browse.return_value = browse_payload

    result = resolver.resolve("  Amazing Spider-Man #300 ", 10)

    client.search_browse.assert_called_once_with("tok", "Amazing Spider-Man #300", 10)
    client.search_finding.assert_not_called()
    assert result.source == "browse"
    assert [i.title for i in result.items][0] == "Amazing Spider-Man #300 CGC 9.8"


def test_primary_401_falls_back_to_finding(resolver, client, token_cache, finding_payload):
    client.search_browse.side_effect = AuthError(
        "eBay Browse rejected credentials", detail={"upstreamStatus": 401}
    )
    client.search_finding.return_value = finding_payload

    result = resolver.resolve("Batman #423", 10)

    assert result.source == "finding"
    assert len(result.items) == 2
    assert result.to_dict()["_source"] == "finding"
    # the rejected token is dropped from the cache
    token_cache.invalidate.assert_called_once()


def test_token_failure_falls_back_to_finding(resolver, client, token_cache, finding_payload):
    token_cache.acquire_token.side_effect = AuthError("OAuth failed")
    client.search_finding.return_value = finding_payload

    result = resolver.resolve("Batman #423", 10)

    assert result.source == "finding"
    client.search_browse.assert_not_called()


def test_unconfigured_browse_falls_back_to_finding(
    resolver, client, token_cache, finding_payload
):
    token_cache.acquire_token.side_effect = ConfigError("Server not configured")
    client.search_finding.return_value = finding_payload

    assert resolver.resolve("Batman", 10).source == "finding"


def test_primary_500_propagates_without_fallback(resolver, client):
    client.search_browse.side_effect = UpstreamError(
        "eBay Browse request failed", detail={"upstreamStatus": 500}
    )

    with pytest.raises(UpstreamError):
        resolver.resolve("Batman", 10)
    client.search_finding.assert_not_called()


def test_primary_rate_limit_propagates_without_fallback(resolver, client):
    client.search_browse.side_effect = UpstreamError(
        "eBay Browse rate limit exceeded", status_code=429
    )

    with pytest.raises(UpstreamError) as exc:
        resolver.resolve("Batman", 10)
    assert exc.value.status_code == 429
    client.search_finding.assert_not_called()


def test_secondary_failure_surfaces_upstream_error(resolver, client):
    client.search_browse.side_effect = AuthError("rejected")
    client.search_finding.side_effect = UpstreamError("Invalid application")

    with pytest.raises(UpstreamError) as exc:
        resolver.resolve("Batman", 10)
    assert exc.value.message == "Invalid application"


def test_mode_finding_skips_browse(resolver, client, token_cache, finding_payload):
    client.search_finding.return_value = finding_payload

    result = resolver.resolve("Batman", 1, mode="finding")

    assert result.source == "finding"
    assert len(result.items) == 1
    token_cache.acquire_token.assert_not_called()
    client.search_browse.assert_not_called()


def test_mode_browse_does_not_fall_back(resolver, client):
    client.search_browse.side_effect = AuthError("rejected")

    with pytest.raises(AuthError):
        resolver.resolve("Batman", 10, mode="browse")
    client.search_finding.assert_not_called()


def test_unreadable_browse_reply_stays_in_error_taxonomy(cfg, make_response):
    token_cache = Mock()
    token_cache.acquire_token.return_value = "tok"
    session = Mock()
    session.get.return_value = make_response(200, None, text="<html>down</html>")
    resolver = SoldListingsResolver(
        token_cache, EbayAPIClient(cfg, session=session, sleep=lambda s: None)
    )

    with pytest.raises(UpstreamError) as exc:
        resolver.resolve("Spawn", 5)
    assert exc.value.message == "eBay Browse returned an unreadable reply"
    # not an auth failure, so Finding is never asked
    assert session.get.call_count == 1
