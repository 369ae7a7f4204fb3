from shopdesk.handlers.common import split_update
from shopdesk.rpc import operation, unwrap
from shopdesk.schemas.common import BusinessScopedQuery, IdPayload
from shopdesk.schemas.entities import (
    EmployeeCreate,
    EmployeeRead,
    EmployeeSalesQuery,
    EmployeeUpdate,
    SalesRead,
)
from shopdesk.services import employee_service


def _employee(employee) -> dict:
    return EmployeeRead.model_validate(employee).to_payload()


@operation("entities:employee:create")
def create(ctx, payload):
    data = EmployeeCreate.model_validate(unwrap(payload, "employeeData", "data"))
    employee = employee_service.create_employee(ctx.db, data)
    return {"employee": _employee(employee), "message": "Employee created successfully"}


@operation("entities:employee:get-all")
def get_all(ctx, payload):
    query = BusinessScopedQuery.model_validate(payload)
    employees = employee_service.list_employees(ctx.db, query.business_id)
    return {"employees": [_employee(employee) for employee in employees]}


@operation("entities:employee:get")
def get(ctx, payload):
    query = IdPayload.model_validate(payload)
    return {"employee": _employee(employee_service.get_employee(ctx.db, query.id))}


@operation("entities:employee:update")
def update(ctx, payload):
    employee_id, changes = split_update(payload)
    query = IdPayload.model_validate({"id": employee_id})
    employee = employee_service.update_employee(ctx.db, query.id, EmployeeUpdate.model_validate(changes))
    return {"employee": _employee(employee), "message": "Employee updated successfully"}


@operation("entities:employee:delete")
def delete(ctx, payload):
    query = IdPayload.model_validate(payload)
    employee_service.delete_employee(ctx.db, query.id)
    return {"message": "Employee deleted successfully"}


@operation("entities:employee:get-sales")
def get_sales(ctx, payload):
    query = EmployeeSalesQuery.model_validate(payload)
    sales = employee_service.employee_sales(ctx.db, query.id, start=query.start_date, end=query.end_date)
    return {"sales": [SalesRead.model_validate(sale).to_payload() for sale in sales]}
