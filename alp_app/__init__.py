"""
ALP App - Adaptive Learning Platform Dashboard

A client-side dashboard for an external course ledger. Connects to a
signing agent, resolves the caller's role, enumerates the course catalog
and drives milestone/reward transactions through to confirmation.
"""

__version__ = "0.1.0"
__author__ = "ALP Team"
