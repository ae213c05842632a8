"""
models.py - Record Types
========================
Plain dataclasses passed between the validator, the lookup clients,
the row processor and the output sink.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class Status(str, Enum):
    VALID = "VALID"
    INVALID = "INVALID"


# Marker written into the BANK column for codes that fail the structural rule
INVALID_MARKER = "Invalid IFSC"


@dataclass(frozen=True)
class BankDetails:
    """Bank/branch metadata returned by the IFSC directory."""

    bank: str
    branch: str
    address: str | None = None
    city: str | None = None
    state: str | None = None
    micr: str | None = None

    @classmethod
    def from_directory(cls, data: Dict[str, Any]) -> "BankDetails":
        """
        Build from a directory response such as
        {"BANK": "HDFC Bank", "BRANCH": "THE AGS EMPLOYEES COOP BANK LTD", ...}
        """
        return cls(
            bank=str(data.get("BANK") or "").strip(),
            branch=str(data.get("BRANCH") or "").strip(),
            address=data.get("ADDRESS"),
            city=data.get("CITY"),
            state=data.get("STATE"),
            micr=data.get("MICR"),
        )


@dataclass(frozen=True)
class CodeRecord:
    """
    One result row: the code plus what we learned about it.

    Written to the sink as IFSC, BANK, BRANCH, STATUS and returned by
    the HTTP endpoint with lower-case keys.
    """

    ifsc: str
    bank: str | None
    branch: str | None
    status: Status

    @property
    def is_valid(self) -> bool:
        return self.status is Status.VALID

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "CodeRecord":
        """Rebuild a record from a sink row; rows without STATUS are judged by the BANK marker."""
        status = row.get("STATUS")
        if status is None:
            status = Status.INVALID if row.get("BANK") == INVALID_MARKER else Status.VALID
        status = Status(status)
        if status is Status.INVALID:
            return cls(row.get("IFSC"), None, None, status)
        return cls(row.get("IFSC"), row.get("BANK"), row.get("BRANCH"), status)

    def to_row(self) -> Dict[str, Any]:
        return {
            "IFSC": self.ifsc,
            "BANK": self.bank if self.is_valid else INVALID_MARKER,
            "BRANCH": self.branch,
            "STATUS": self.status.value,
        }

    def to_json(self) -> Dict[str, Any]:
        return {
            "ifsc": self.ifsc,
            "bank": self.bank,
            "branch": self.branch,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class RegionResult:
    name: str
    address: str

    def to_json(self) -> Dict[str, str]:
        return {"name": self.name, "address": self.address}
