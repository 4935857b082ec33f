"""
Pipeline orchestration package for CSV cleaning.

This package wires the deterministic core (codec, validator, profiling)
to the LLM collaborators and holds the host-side workflow state in
`CleaningSession`. The LLM-backed modules are imported explicitly by
callers that need them, e.g.:

    from dataclysm.pipeline.session import CleaningSession
"""


__all__ = []
# Empty __all__ to avoid importing the LLM stack by default
