"""
http_client.py - HTTP Client for Remote Directories
====================================================
A thin wrapper around a requests Session shared by the IFSC directory
client (lookup.py) and the region search client (region.py).

Features:
---------
- One Session per remote service (connection pooling)
- Configurable timeout on every request
- JSON Accept header and optional User-Agent
- Network errors reported as status 0 instead of raised

Each call is made exactly once (no retry); the caller decides what to log.
"""

import logging

import requests


logger = logging.getLogger(__name__)


class HttpClient:
    """
    HTTP client bound to one base URL.

    Usage:
        client = HttpClient("https://ifsc.razorpay.com", timeout=20)
        status, content_type, body = client.get_json("/HDFC0CAGSBK")
        client.close()
    """

    def __init__(self, base_url: str, timeout: int = 20, user_agent: str | None = None):
        # Create a requests Session for connection pooling
        self.s = requests.Session()

        self.base = base_url.rstrip("/")
        self.timeout = timeout

        self.s.headers.update({"Accept": "application/json"})
        if user_agent:
            self.s.headers.update({"User-Agent": user_agent})

    def get_json(self, path: str, params: dict | None = None):
        """
        Make a single GET request.

        Args:
            path: Endpoint path appended to the base URL (e.g., "/HDFC0CAGSBK")
            params: Optional query parameters

        Returns:
            A tuple of (status_code, content_type, body):
            - status_code: HTTP status code, or 0 on a network error
            - content_type: The Content-Type header value
            - body: The response body as a string (error text on network error)
        """
        url = f"{self.base}{path}"
        logger.debug(f"GET {url} params={params}")

        try:
            r = self.s.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            # Timeout, connection refused, DNS failure, etc.
            return 0, "", f"Network error: {type(e).__name__}: {e}"

        return r.status_code, r.headers.get("content-type", ""), r.text or ""

    def close(self):
        """Close the HTTP session and release resources."""
        self.s.close()
