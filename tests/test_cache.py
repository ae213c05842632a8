"""Tests for the per-run validation/lookup cache."""

from __future__ import annotations

import pytest

from conftest import FakeRules
from ifsccheck.cache import ResultCache
from ifsccheck.errors import NetworkError, NotFoundError


class TestGetOrValidate:
    def test_validates_each_code_once(self, cache: ResultCache, rules: FakeRules) -> None:
        assert cache.get_or_validate("HDFC0CAGSBK") is True
        assert cache.get_or_validate("hdfc0cagsbk") is True
        assert rules.validate_calls == ["HDFC0CAGSBK"]

    def test_non_string_values_are_invalid(self, cache: ResultCache, rules: FakeRules) -> None:
        assert cache.get_or_validate(None) is False
        assert cache.get_or_validate(float("nan")) is False
        assert rules.validate_calls == []


class TestGetOrFetch:
    def test_fetches_once_per_code(self, cache: ResultCache, rules: FakeRules) -> None:
        first = cache.get_or_fetch("SBIN0000001")
        second = cache.get_or_fetch("SBIN0000001")
        assert first == second
        assert first.bank == "State Bank of India"
        assert rules.fetch_calls == ["SBIN0000001"]
        assert cache.fetch_count == 1

    def test_invalid_code_never_reaches_directory(self, cache: ResultCache, rules: FakeRules) -> None:
        with pytest.raises(ValueError):
            cache.get_or_fetch("INVALID000")
        assert rules.fetch_calls == []

    def test_failure_is_cached(self) -> None:
        rules = FakeRules(failures={"HDFC0CAGSBK": NetworkError("HDFC0CAGSBK", "timed out")})
        cache = ResultCache(rules)
        for _ in range(2):
            with pytest.raises(NetworkError, match="timed out"):
                cache.get_or_fetch("HDFC0CAGSBK")
        assert rules.fetch_calls == ["HDFC0CAGSBK"]

    def test_not_found(self, cache: ResultCache) -> None:
        with pytest.raises(NotFoundError):
            cache.get_or_fetch("ABCD0123456")
