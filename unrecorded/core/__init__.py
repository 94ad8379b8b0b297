"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (salt generation is the one
      function that reads from the OS random source)

Design Decisions:
    - Functional core separated from imperative shell: services/ opens the
      transactions, core/ decides what the transaction should do
"""
