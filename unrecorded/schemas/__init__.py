"""Pydantic Schemas — request/response shapes for API endpoints.

Invariants:
    - Schemas carry types only; field rules live in core/validation.py so the
      HTTP layer and direct callers get the same InvalidArgumentError
    - Password hash and salt never appear in any response schema
"""
