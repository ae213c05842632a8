"""
region.py - Bank Search by Region
=================================
Searches OpenStreetMap Nominatim for banks in a free-text region
("pune", "tamil nadu", ...).

Response contract:
------------------
GET /search?q=bank in <region>&format=json&addressdetails=1 returns a JSON
list; each item has

- display_name : full place name (used as the result name)
- address      : optional object with road, city/town/village, state, country

Items are mapped to RegionResult(name, address). Anything else in the
payload is ignored.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

import pandas as pd

from .config import Settings
from .errors import InputFailure, RegionSearchError
from .http_client import HttpClient
from .models import RegionResult


logger = logging.getLogger(__name__)

NO_ADDRESS = "Address not available"


def format_address(address: Dict[str, Any] | None) -> str:
    """
    Flatten a Nominatim address object to "road, city, state, country".

    Nominatim uses town or village instead of city for smaller places.
    """
    if not address:
        return NO_ADDRESS
    city = address.get("city") or address.get("town") or address.get("village") or ""
    parts = [address.get("road") or "", city, address.get("state") or "", address.get("country") or ""]
    return ", ".join(parts)


def parse_results(data: Any) -> List[RegionResult]:
    if not isinstance(data, list):
        return []
    results = []
    for place in data:
        if not isinstance(place, dict) or not place.get("display_name"):
            continue
        results.append(RegionResult(name=place["display_name"], address=format_address(place.get("address"))))
    return results


def filter_by_region(results: Iterable[RegionResult], token: str) -> List[RegionResult]:
    """Keep results whose name or address mentions `token` (case-insensitive)."""
    needle = token.strip().lower()
    if not needle:
        return list(results)
    return [r for r in results if needle in r.name.lower() or needle in r.address.lower()]


def write_region_results(results: List[RegionResult], output_path: Path):
    """Save region results to a workbook with NAME and ADDRESS columns."""
    df = pd.DataFrame([{"NAME": r.name, "ADDRESS": r.address} for r in results], columns=["NAME", "ADDRESS"])
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_excel(output_path, index=False, sheet_name="Regions", engine="openpyxl")
    logger.info(f"Region results written to {output_path.resolve()}")


class RegionSearchClient:
    """
    Usage:
        client = RegionSearchClient.from_settings(settings)
        for place in client.search("pune"):
            print(place.name, place.address)
    """

    def __init__(self, http: HttpClient):
        self.http = http

    @classmethod
    def from_settings(cls, settings: Settings) -> "RegionSearchClient":
        return cls(HttpClient(settings.region_url, settings.timeout_sec, user_agent=settings.user_agent))

    def search(self, region: str) -> List[RegionResult]:
        """
        Find banks in a region.

        Raises:
            InputFailure: `region` is blank
            RegionSearchError: The service failed or returned unreadable data
        """
        location = (region or "").strip().lower()
        if not location:
            raise InputFailure("Region name is required")

        logger.info(f"Fetching bank details for {location}...")
        params = {"q": f"bank in {location}", "format": "json", "addressdetails": 1}
        status, content_type, body = self.http.get_json("/search", params=params)

        if status != 200:
            raise RegionSearchError(location, f"Region search failed ({status}): {body[:200].strip()}")

        try:
            data = json.loads(body)
        except (json.JSONDecodeError, ValueError) as e:
            raise RegionSearchError(location, f"Invalid JSON from region search: {str(e)[:50]}") from e

        return parse_results(data)

    def close(self):
        self.http.close()
