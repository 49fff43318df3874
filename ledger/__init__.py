"""
Ledger - Source Package

Records income and expense transactions and derives the views a
personal finance dashboard needs from them.

DESIGN PRINCIPLES:
1. Every view is a pure function of one immutable snapshot
2. Fail early, fail visibly
3. No silent coercion of malformed records
4. Every store mutation is auditable
5. Storage and presentation are swappable collaborators
"""

__version__ = "1.0.0"
__author__ = "Ledger Team"
