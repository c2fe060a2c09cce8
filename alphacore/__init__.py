"""Core prediction logic: models, fixed-point codec, indicators, strategies.

This package contains pure business logic with no I/O dependencies
(no HTTP, no ledger access). Network-bound collaborators live in the
``alphabot`` service package and are passed in by the caller.
"""
