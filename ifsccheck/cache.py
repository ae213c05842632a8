"""
cache.py - Per-Run Result Cache
===============================
Remembers, for the lifetime of one process:

- code -> validation result (bool)
- code -> fetched BankDetails, or the LookupFailure the one fetch raised

so that every code is validated once and looked up remotely at most once,
no matter how many rows, console entries or HTTP requests mention it.
Entries are never evicted.
"""

import logging
import threading
from typing import Dict

from .errors import LookupFailure
from .models import BankDetails
from .validator import IfscRules, normalize_code


logger = logging.getLogger(__name__)


class ResultCache:
    """
    Check-then-populate cache in front of an IfscRules implementation.

    Codes are normalized (stripped, upper-cased) before they are used as keys,
    so "sbin0000001" and " SBIN0000001 " share one entry.

    Usage:
        cache = ResultCache(IfscClient.from_settings(settings))
        if cache.get_or_validate(code):
            details = cache.get_or_fetch(code)   # remote call on first use only
    """

    def __init__(self, rules: IfscRules):
        self.rules = rules
        self._valid: Dict[str, bool] = {}
        self._details: Dict[str, BankDetails | LookupFailure] = {}
        self._lock = threading.Lock()
        self.fetch_count = 0

    def get_or_validate(self, code) -> bool:
        # Non-string cells (numbers, NaN, None) are never valid codes
        if not isinstance(code, str):
            return False
        key = normalize_code(code)
        with self._lock:
            if key not in self._valid:
                self._valid[key] = self.rules.validate(key)
            return self._valid[key]

    def get_or_fetch(self, code) -> BankDetails:
        """
        Return cached details, fetching them on first use.

        Raises:
            ValueError: `code` fails validation (it is never sent to the directory)
            LookupFailure: The fetch failed, now or on an earlier call
        """
        key = normalize_code(code)
        if not self.get_or_validate(code):
            raise ValueError(f"{key!r} is not a valid IFSC code")

        with self._lock:
            if key not in self._details:
                self.fetch_count += 1
                try:
                    self._details[key] = self.rules.fetch_details(key)
                except LookupFailure as e:
                    self._details[key] = e
            entry = self._details[key]

        if isinstance(entry, LookupFailure):
            raise entry
        return entry

    def __len__(self):
        return len(self._valid)
