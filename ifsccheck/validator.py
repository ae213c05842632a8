"""
validator.py - IFSC Structural Rule
===================================
An IFSC code is 11 characters:

    HDFC 0 CAGSBK
    ^^^^ ^ ^^^^^^
    |    | +-- branch code: 6 letters or digits
    |    +---- always the digit zero (reserved)
    +--------- bank code: 4 letters

validate() checks only this structure. Whether a well-formed code actually
exists is answered by the remote directory (see lookup.py).

The validator and the directory are combined behind the IfscRules protocol
so the row processor, console and HTTP endpoint can be run against a fake
in tests.
"""

import re
from typing import Any, Protocol

from .models import BankDetails


# Bank code (4 letters) + reserved "0" + branch code (6 alphanumerics)
IFSC_PATTERN = re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$")


def normalize_code(code: Any) -> str:
    """
    Turn a raw cell/prompt value into the canonical upper-case form.

    Examples:
        normalize_code(" hdfc0cagsbk ") -> "HDFC0CAGSBK"
        normalize_code(None)            -> ""
    """
    if code is None:
        return ""
    return str(code).strip().upper()


def validate(code: Any) -> bool:
    """
    Return True if `code` has the structure of an IFSC code.

    Never raises: None, numbers, empty strings and anything of the wrong
    length or character classes simply give False.
    """
    if not isinstance(code, str):
        return False
    return IFSC_PATTERN.match(normalize_code(code)) is not None


class IfscRules(Protocol):
    """Validation rule plus the remote directory that enriches valid codes."""

    def validate(self, code: str) -> bool:
        ...

    def fetch_details(self, code: str) -> BankDetails:
        ...
