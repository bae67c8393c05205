"""Domain layer: pure resolution, field, rule, and payload logic.

Nothing here performs I/O.
"""
