"""Employee Service — query layer between the API routes and the upstream client.

Invariants:
    - Every derived query reads one fresh get_all() snapshot (no caching)
    - Upstream errors propagate unchanged; only not-found becomes None
    - delete_by_id: lookup strictly happens-before delete; delete never issued
      when the lookup finds nothing

Design Decisions:
    - Derivations delegated to core/employee_queries (pure, tested without IO)
    - delete_by_id race (rename/delete between lookup and delete) accepted,
      no compensation: the upstream only deletes by name
"""

import logging
from typing import Protocol

from employee_api.core import employee_queries
from employee_api.core.domain_types import EmployeeId
from employee_api.schemas.employee import DeleteInput, Employee, EmployeeInput

logger = logging.getLogger(__name__)


class EmployeeUpstream(Protocol):
    """What the service needs from the upstream client."""

    async def get_by_id(self, employee_id: EmployeeId) -> Employee | None: ...

    async def get_all(self) -> list[Employee]: ...

    async def create(self, employee_input: EmployeeInput) -> Employee: ...

    async def delete(self, delete_input: DeleteInput) -> bool: ...


class EmployeeService:
    """Search, aggregation and compound delete over the upstream employee list."""

    def __init__(self, client: EmployeeUpstream):
        self.client = client

    async def get_all(self) -> list[Employee]:
        logger.debug("Fetching all employees")
        return await self.client.get_all()

    async def get_by_name_search(self, query: str) -> list[Employee]:
        logger.debug(f"Searching employees by name '{query}'")
        return employee_queries.filter_by_name(await self.get_all(), query)

    async def get_by_id(self, employee_id: EmployeeId) -> Employee | None:
        logger.debug(
            f"Getting employee by id {employee_id}",
            extra={"employee_id": employee_id},
        )
        return await self.client.get_by_id(employee_id)

    async def get_highest_salary(self) -> int | None:
        logger.debug("Getting highest salary")
        return employee_queries.highest_salary(await self.get_all())

    async def top_earners(self, n: int) -> list[str]:
        logger.debug(f"Getting top {n} earning employee names")
        return employee_queries.top_earners(await self.get_all(), n)

    async def create(self, employee_input: EmployeeInput) -> Employee:
        logger.debug(f"Creating employee '{employee_input.name}'")
        return await self.client.create(employee_input)

    async def delete_by_id(self, employee_id: EmployeeId) -> str | None:
        """Delete the employee with this id. Returns the deleted name, or None."""
        logger.debug(
            f"Deleting employee {employee_id}", extra={"employee_id": employee_id},
        )
        employee = await self.get_by_id(employee_id)
        if employee is None:
            logger.warning(
                f"No employee with id: {employee_id}",
                extra={"employee_id": employee_id},
            )
            return None

        deleted = await self.client.delete(DeleteInput(name=employee.name))
        if deleted:
            logger.info(
                f"Successfully deleted employee: {employee.name}",
                extra={"employee_id": employee_id},
            )
            return employee.name
        logger.warning(
            f"Failed to delete employee: {employee.name}",
            extra={"employee_id": employee_id},
        )
        return None
