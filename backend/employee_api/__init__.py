"""Employee API Package — HTTP facade over the upstream employee service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
