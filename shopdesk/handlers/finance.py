from shopdesk.handlers.common import split_update
from shopdesk.rpc import operation, unwrap
from shopdesk.schemas.common import IdPayload
from shopdesk.schemas.finance import (
    IncomeCreate,
    IncomeQuery,
    IncomeRead,
    IncomeUpdate,
    OhadaCodeCreate,
    OhadaCodeQuery,
    OhadaCodeRead,
)
from shopdesk.services import export_service, finance_service


@operation("finance:income:get-all")
def get_all_incomes(ctx, payload):
    query = IncomeQuery.model_validate(unwrap(payload, "filters", "data"))
    incomes = finance_service.list_incomes(ctx.db, query)
    return {"incomes": [IncomeRead.model_validate(income).to_payload() for income in incomes]}


@operation("finance:income:create")
def create_income(ctx, payload):
    data = IncomeCreate.model_validate(unwrap(payload, "data"))
    income = finance_service.create_income(ctx.db, data, user_id=ctx.user_id)
    return {"income": IncomeRead.model_validate(income).to_payload()}


@operation("finance:income:update")
def update_income(ctx, payload):
    income_id, changes = split_update(payload)
    query = IdPayload.model_validate({"id": income_id})
    income = finance_service.update_income(ctx.db, query.id, IncomeUpdate.model_validate(changes))
    return {"income": IncomeRead.model_validate(income).to_payload()}


@operation("finance:income:delete")
def delete_income(ctx, payload):
    query = IdPayload.model_validate(payload)
    finance_service.delete_income(ctx.db, query.id)
    return {"message": "Income deleted"}


@operation("finance:income:export")
def export_incomes(ctx, payload):
    query = IncomeQuery.model_validate(unwrap(payload, "filters", "data"))
    path = export_service.export_incomes(ctx.db, query)
    return {"path": str(path)}


@operation("finance:ohada-codes:get-by-type")
def codes_by_type(ctx, payload):
    query = OhadaCodeQuery.model_validate(payload)
    codes = finance_service.codes_by_type(ctx.db, query.type)
    return {"codes": [OhadaCodeRead.model_validate(code).to_payload() for code in codes]}


@operation("finance:ohada-codes:create")
def create_code(ctx, payload):
    data = OhadaCodeCreate.model_validate(unwrap(payload, "data"))
    code = finance_service.create_code(ctx.db, data)
    return {"code": OhadaCodeRead.model_validate(code).to_payload()}
