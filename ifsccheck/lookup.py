"""
lookup.py - IFSC Directory Client
=================================
Fetches bank and branch details for a valid IFSC code from the Razorpay
IFSC directory:

    GET https://ifsc.razorpay.com/HDFC0CAGSBK

    200 -> {"BANK": "HDFC Bank", "BRANCH": "THE AGS EMPLOYEES COOP BANK LTD",
            "ADDRESS": "...", "CITY": "BANGALORE", "STATE": "KARNATAKA",
            "MICR": "560226263", ...}
    404 -> "Not Found"
"""

import json
import logging

from .config import Settings
from .errors import NetworkError, NotFoundError
from .http_client import HttpClient
from .models import BankDetails
from .validator import normalize_code, validate


logger = logging.getLogger(__name__)


class IfscClient:
    """
    Structural validation plus remote lookup; implements IfscRules.

    Usage:
        client = IfscClient.from_settings(settings)
        if client.validate(code):
            details = client.fetch_details(code)
        client.close()
    """

    def __init__(self, http: HttpClient):
        self.http = http

    @classmethod
    def from_settings(cls, settings: Settings) -> "IfscClient":
        return cls(HttpClient(settings.lookup_url, settings.timeout_sec))

    def validate(self, code: str) -> bool:
        return validate(code)

    def fetch_details(self, code: str) -> BankDetails:
        """
        Look up one code in the directory.

        Raises:
            NotFoundError: The directory has no such code (404)
            NetworkError: Any other failure (network, status, bad JSON)
        """
        code = normalize_code(code)
        status, content_type, body = self.http.get_json(f"/{code}")

        if status == 404:
            raise NotFoundError(code, f"IFSC {code} not found in directory")

        if status != 200:
            snippet = body[:200].strip()
            raise NetworkError(code, f"Directory lookup for {code} failed ({status}): {snippet}")

        try:
            data = json.loads(body)
        except (json.JSONDecodeError, ValueError) as e:
            raise NetworkError(code, f"Invalid JSON from directory for {code}: {str(e)[:50]}") from e

        if not isinstance(data, dict) or not data.get("BANK"):
            raise NotFoundError(code, f"Directory returned no bank data for {code}")

        details = BankDetails.from_directory(data)
        logger.debug(f"{code} -> {details.bank} / {details.branch}")
        return details

    def close(self):
        self.http.close()
