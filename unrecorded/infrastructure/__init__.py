"""Infrastructure Layer — database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ domain logic except errors and protocols
    - All SQLAlchemy failures mapped to UnrecordedError subclasses before leaving this layer
"""
