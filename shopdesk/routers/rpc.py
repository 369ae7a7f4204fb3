from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Header, Request
from sqlalchemy.orm import Session

from shopdesk.core.security import get_bearer_token
from shopdesk.database.session import get_db
from shopdesk.rpc import RequestContext, dispatch, registered_operations

router = APIRouter(prefix="/rpc", tags=["Operations"])


@router.get("")
def list_operations():
    return {"success": True, "operations": registered_operations()}


@router.post("/{operation}")
def call_operation(
    operation: str,
    request: Request,
    payload: Optional[Any] = Body(None),
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
):
    ctx = RequestContext(
        db=db,
        token=get_bearer_token(authorization),
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
    return dispatch(operation, payload, ctx)
