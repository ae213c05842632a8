"""Shared pytest fixtures and fakes for the remote services.

Provides:
- FakeRules: IfscRules backed by an in-memory directory, with call counters
- FakeRegionClient: canned region search results
- FakeHttp: canned (status, content_type, body) responses per path
- rules / cache / sink / region_client fixtures
"""

from __future__ import annotations

from typing import Any

import pytest

from ifsccheck.cache import ResultCache
from ifsccheck.errors import NotFoundError
from ifsccheck.models import BankDetails, RegionResult
from ifsccheck.sink import ResultSink
from ifsccheck.validator import validate


DIRECTORY = {
    "HDFC0CAGSBK": BankDetails("HDFC Bank", "THE AGS EMPLOYEES COOP BANK LTD"),
    "SBIN0000001": BankDetails("State Bank of India", "KOLKATA MAIN"),
    "ICIC0000002": BankDetails("ICICI Bank", "MUMBAI NARIMAN POINT"),
}


class FakeRules:
    def __init__(self, directory: dict | None = None, failures: dict | None = None) -> None:
        self.directory = dict(DIRECTORY) if directory is None else directory
        self.failures = failures or {}
        self.validate_calls: list[str] = []
        self.fetch_calls: list[str] = []

    def validate(self, code: str) -> bool:
        self.validate_calls.append(code)
        return validate(code)

    def fetch_details(self, code: str) -> BankDetails:
        self.fetch_calls.append(code)
        if code in self.failures:
            raise self.failures[code]
        if code not in self.directory:
            raise NotFoundError(code, f"IFSC {code} not found in directory")
        return self.directory[code]


class FakeRegionClient:
    def __init__(self, results: list[RegionResult] | None = None, error: Exception | None = None) -> None:
        self.results = results or []
        self.error = error
        self.queries: list[str] = []

    def search(self, region: str) -> list[RegionResult]:
        self.queries.append(region)
        if self.error is not None:
            raise self.error
        return self.results


class FakeHttp:
    def __init__(self, responses: dict[str, tuple[int, str, str]]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    def get_json(self, path: str, params: dict | None = None):
        self.calls.append((path, params))
        return self.responses[path]

    def close(self) -> None:
        self.closed = True


PUNE_RESULTS = [
    RegionResult("HDFC Bank, FC Road, Pune, Maharashtra, India", "FC Road, Pune, Maharashtra, India"),
    RegionResult("State Bank of India, Camp, Pune, Maharashtra, India", "MG Road, Pune, Maharashtra, India"),
]


@pytest.fixture()
def rules() -> FakeRules:
    return FakeRules()


@pytest.fixture()
def cache(rules: FakeRules) -> ResultCache:
    return ResultCache(rules)


@pytest.fixture()
def sink(tmp_path) -> ResultSink:
    return ResultSink(tmp_path / "output.xlsx")


@pytest.fixture()
def region_client() -> FakeRegionClient:
    return FakeRegionClient(PUNE_RESULTS)
