"""
Ledger Kernel - recurring entry engine

A transactional core for a household/team finance tracker with:
- Monthly recurring templates for income and expenses
- A rolling window of scheduled occurrences kept in sync with each template
- Reversible apply/cancel of occurrences into real ledger records
- Injected clock and horizon for deterministic behavior
"""

__version__ = "0.1.0"
