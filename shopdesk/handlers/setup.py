from shopdesk.rpc import operation
from shopdesk.schemas.auth import SetupAccountRequest, UserIdPayload
from shopdesk.schemas.entities import BusinessRead
from shopdesk.services import setup_service


@operation("setup:create-account")
def create_account(ctx, payload):
    if "userId" not in payload and "user_id" not in payload and ctx.user_id is not None:
        payload = dict(payload, userId=ctx.user_id)
    data = SetupAccountRequest.model_validate(payload)
    business = setup_service.create_account(
        ctx.db, data, ip_address=ctx.ip_address, user_agent=ctx.user_agent
    )
    return {"business": BusinessRead.model_validate(business).to_payload(), "isSetupComplete": True}


@operation("setup:check-status", public=True)
def check_status(ctx, payload):
    query = UserIdPayload.model_validate(payload)
    return {"isSetupComplete": setup_service.is_setup_complete(ctx.db, query.user_id)}
