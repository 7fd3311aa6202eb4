"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate SHAPE at the system boundary (types, required fields)
    - Title/content limits are NOT duplicated here: core/enforce_note_policy.py
      reports them with their specific error codes

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
