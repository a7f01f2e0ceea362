"""Employee Queries — derived views over a snapshot of the upstream employee list.

Invariants:
    - Pure functions: no IO, no async, no logging
    - Input order is preserved by filtering, and kept among equal salaries by sorting
    - Inputs are never mutated

Design Decisions:
    - str.lower() for case folding: locale-independent, same result on every host
    - sorted() is stable, so ties keep upstream order without a secondary key
"""

from collections.abc import Sequence

from employee_api.schemas.employee import Employee


def filter_by_name(employees: Sequence[Employee], query: str) -> list[Employee]:
    """Employees whose name contains query, case-insensitively. Empty query matches all."""
    needle = query.lower()
    return [e for e in employees if needle in e.name.lower()]


def highest_salary(employees: Sequence[Employee]) -> int | None:
    """Maximum salary, or None for an empty list."""
    return max((e.salary for e in employees), default=None)


def top_earners(employees: Sequence[Employee], n: int) -> list[str]:
    """Names of the first n employees by descending salary."""
    if n <= 0:
        return []
    ranked = sorted(employees, key=lambda e: e.salary, reverse=True)
    return [e.name for e in ranked[:n]]
