"""
Cashbook - Source Package

A small bookkeeping application: cash in / cash out / expense entries,
running balances, employee payslips, and a receipt upload relay.

DESIGN PRINCIPLES:
1. The hosted data platform owns all persisted state
2. Validate locally, before any network call
3. Upstream error messages pass through unmodified
4. Unexpected failures are logged in full, reported generically
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Cashbook Team"
