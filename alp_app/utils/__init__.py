"""
Utility functions module.

Currency conversion between human-entered decimal strings and the
ledger's base-unit integers, and address comparison helpers.

Conversion rules:
- Amounts crossing into the ledger are always base-unit integers
- Amounts shown to a human are decimal strings in the display unit
- Conversion is exact integer arithmetic; no float ever touches an amount
"""
