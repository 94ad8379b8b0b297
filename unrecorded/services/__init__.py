"""Service Layer — transactional orchestration over the Store boundary.

Invariants:
    - Every public operation validates its input before opening a transaction
    - Every mutation runs inside exactly one store transaction
    - Services receive a Store; they never construct engines or sessions
"""
