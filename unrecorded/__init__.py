"""Unrecorded Application Package — messaging backend with session auth and membership integrity.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
