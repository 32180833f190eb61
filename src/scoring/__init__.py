"""Change request scoring engine.

Weighted multi-factor scoring of change requests: risk, effort, benefit
and priority scores with their ordinal levels, computed from the raw
request wizard data.

Deterministic -- no I/O, no shared mutable state.
"""
