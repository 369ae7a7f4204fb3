from shopdesk.core.errors import Unauthorized
from shopdesk.rpc import operation
from shopdesk.schemas.auth import LoginRequest, RegisterRequest, UserIdPayload
from shopdesk.services import auth_service


def _user_id(ctx, payload) -> int:
    if "userId" in payload or "user_id" in payload:
        return UserIdPayload.model_validate(payload).user_id
    if ctx.user_id is None:
        raise Unauthorized("No active session")
    return ctx.user_id


@operation("auth:register", public=True)
def register(ctx, payload):
    data = RegisterRequest.model_validate(payload)
    user = auth_service.register(ctx.db, data, ip_address=ctx.ip_address, user_agent=ctx.user_agent)
    return {"message": "User registered successfully", **auth_service.session_payload(ctx.db, user)}


@operation("auth:login", public=True)
def login(ctx, payload):
    data = LoginRequest.model_validate(payload)
    user = auth_service.login(ctx.db, data, ip_address=ctx.ip_address, user_agent=ctx.user_agent)
    return {"message": "Login successful", **auth_service.session_payload(ctx.db, user)}


@operation("auth:logout", public=True)
def logout(ctx, payload):
    auth_service.logout(ctx.db, _user_id(ctx, payload), ip_address=ctx.ip_address, user_agent=ctx.user_agent)
    return {"message": "Logged out successfully"}


@operation("auth:check", public=True)
def check(ctx, payload):
    user_id = _user_id(ctx, payload)
    if not auth_service.is_active_user(ctx.db, user_id):
        raise Unauthorized("Session user no longer exists")
    return {"isAuthenticated": True, "userId": user_id}


@operation("auth:activities")
def activities(ctx, payload):
    user_id = _user_id(ctx, payload)
    entries = auth_service.activities(ctx.db, user_id)
    return {
        "activities": [
            {
                "id": entry.id,
                "eventType": entry.event_type,
                "status": entry.status,
                "description": entry.description,
                "severity": entry.severity,
                "ipAddress": entry.ip_address,
                "userAgent": entry.user_agent,
                "shopId": entry.shop_id,
                "createdAt": entry.created_at.isoformat(),
            }
            for entry in entries
        ]
    }

