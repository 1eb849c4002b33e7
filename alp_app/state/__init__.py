"""
Action state machine module.

Tracks every state-changing ledger action through
IDLE → SUBMITTING → AWAITING_CONFIRMATION → terminal outcome.
"""
