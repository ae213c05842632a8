"""
ifsccheck - IFSC Code Validator and Bank Lookup
===============================================

Validates Indian bank branch codes (IFSC), looks up bank and branch names
for the valid ones, and records the results in an Excel workbook.

Modules:
--------
- config.py         : Configuration management (loads settings from .env)
- loader.py         : Input file loading (Excel/CSV)
- validator.py      : IFSC structural rule
- http_client.py    : Shared HTTP session wrapper
- lookup.py         : IFSC directory client (bank/branch details)
- region.py         : Bank search by region
- cache.py          : Per-run validation/lookup cache
- sink.py           : Output workbook
- processor.py      : Bulk row processing
- console.py        : Interactive menu
- api.py            : HTTP endpoint (POST /validate)
- run_checker.py    : Main entry point and orchestration

Usage:
------
    python -m ifsccheck.run_checker sample.xlsx
    python -m ifsccheck.run_checker sample.xlsx --no-menu
    python -m ifsccheck.run_checker --serve

Output:
-------
Results are written to output.xlsx (sheet "Results") with columns:
- IFSC: The code as checked (upper-cased)
- BANK: Bank name, or "Invalid IFSC" (red) for malformed codes
- BRANCH: Branch name
- STATUS: VALID or INVALID
"""

__version__ = "1.0.0"
