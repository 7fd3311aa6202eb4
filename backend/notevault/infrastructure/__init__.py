"""Infrastructure Layer — adapters for storage, time, identity, and observability.

Invariants:
    - Each adapter satisfies one Protocol from core/repository_protocols.py
    - Library exceptions are mapped to core/errors.py types at this boundary

Design Decisions:
    - Thin adapters over raw clients: swapping a backend touches one file
"""
