"""Pydantic Schemas — request/response models for the public API and the upstream wire.

Invariants:
    - Schemas validate at system boundaries (user input, upstream responses)
    - Domain enums come from core/domain_types
"""
