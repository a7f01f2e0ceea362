"""Employee Schemas — Pydantic models shared by the upstream wire and the public API.

Invariants:
    - Employee is frozen: an observed record is never modified in place
    - Employee wire keys are the upstream's snake_case names (employee_name, ...)
    - EmployeeInput.name/title: stripped, non-empty
    - EmployeeInput.salary > 0, 16 <= age <= 75

Design Decisions:
    - Aliases over renamed attributes: Python code reads employee.name while the
      JSON keeps employee_name in both directions (FastAPI dumps by alias)
    - DeleteInput separate from EmployeeInput: the upstream deletes by name only
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Employee(BaseModel):
    """Employee record as returned by the upstream service."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: UUID
    name: str = Field(alias="employee_name")
    salary: int = Field(alias="employee_salary", ge=0)
    age: int = Field(alias="employee_age")
    title: str = Field(alias="employee_title")
    email: str = Field(alias="employee_email")


class EmployeeInput(BaseModel):
    """Employee creation body — validated at the API boundary."""
    name: str = Field(min_length=1, max_length=255)
    salary: int = Field(gt=0)
    age: int = Field(ge=16, le=75)
    title: str = Field(min_length=1, max_length=255)

    @field_validator("name", "title")
    @classmethod
    def strip_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class DeleteInput(BaseModel):
    """Upstream delete body."""
    name: str
