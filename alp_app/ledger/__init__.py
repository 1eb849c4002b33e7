"""
Ledger access layer.

Abstract interfaces for the signing agent and the ledger contract handle,
and an in-memory reference ledger used by the demo and the test-suite.
"""
