"""Employee Routes — public facade over the upstream employee service.

Invariants:
    - Static paths (/highestSalary, /topTenHighestEarningEmployeeNames, /search/...)
      registered before /{employee_id} so they are never captured as ids
    - Absence from the service becomes ResourceNotFoundError (404), never an empty 200
    - Employee JSON keeps the upstream's snake_case keys (response_model dumps by alias)
    - Request bodies validated by Pydantic before reaching the handler (400 on failure)

Design Decisions:
    - Thin routes delegate to EmployeeService (no business logic here)
    - DELETE answers with the deleted name as text/plain, not a JSON string
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from employee_api.config import Settings, get_settings
from employee_api.core.domain_types import EmployeeId
from employee_api.core.errors import ResourceNotFoundError
from employee_api.infrastructure.upstream_client import EmployeeClient, get_upstream_client
from employee_api.schemas.employee import Employee, EmployeeInput
from employee_api.services.employee_service import EmployeeService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/employee", tags=["employees"])


def get_employee_service(
    client: EmployeeClient = Depends(get_upstream_client),
) -> EmployeeService:
    return EmployeeService(client)


@router.get("", response_model=list[Employee])
async def get_all_employees(
    service: EmployeeService = Depends(get_employee_service),
):
    """All employees, in upstream order."""
    logger.info("Received request to fetch all employees")
    return await service.get_all()


@router.get("/search/{search_string}", response_model=list[Employee])
async def get_employees_by_name_search(
    search_string: str,
    service: EmployeeService = Depends(get_employee_service),
):
    """Employees whose name contains search_string (case-insensitive)."""
    logger.info(f"Received request to fetch employees by name: {search_string}")
    return await service.get_by_name_search(search_string)


@router.get("/highestSalary", response_model=int)
async def get_highest_salary_of_employees(
    service: EmployeeService = Depends(get_employee_service),
):
    logger.info("Received request to fetch highest salary of employees")
    highest = await service.get_highest_salary()
    if highest is None:
        raise ResourceNotFoundError("Salary", "highest")
    return highest


@router.get("/topTenHighestEarningEmployeeNames", response_model=list[str])
async def get_top_ten_highest_earning_employee_names(
    service: EmployeeService = Depends(get_employee_service),
    settings: Settings = Depends(get_settings),
):
    logger.info("Received request to fetch top ten highest earning employee names")
    return await service.top_earners(settings.top_earners_limit)


@router.get("/{employee_id}", response_model=Employee)
async def get_employee_by_id(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),
):
    logger.info(
        f"Received request to fetch employee by id: {employee_id}",
        extra={"employee_id": employee_id},
    )
    employee = await service.get_by_id(EmployeeId(employee_id))
    if employee is None:
        raise ResourceNotFoundError("Employee", employee_id)
    return employee


@router.post(
    "", response_model=Employee, status_code=status.HTTP_201_CREATED,
)
async def create_employee(
    body: EmployeeInput,
    service: EmployeeService = Depends(get_employee_service),
):
    logger.info("Received request to create employee")
    return await service.create(body)


@router.delete("/{employee_id}", response_class=PlainTextResponse)
async def delete_employee_by_id(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),
):
    """Delete by id; answers with the deleted employee's name."""
    logger.info(
        f"Received request to delete employee by id: {employee_id}",
        extra={"employee_id": employee_id},
    )
    deleted_name = await service.delete_by_id(EmployeeId(employee_id))
    if deleted_name is None:
        raise ResourceNotFoundError("Employee", employee_id)
    return deleted_name
