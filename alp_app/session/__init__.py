"""
Session module.

Negotiates account access with the signing agent, binds the ledger handle
and resolves the caller's role from ledger state.
"""
