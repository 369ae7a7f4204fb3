from typing import List, Optional

from pydantic import Field

from shopdesk.schemas.common import ApiModel
from shopdesk.services.dashboard_service import resolve_scope


class ScopeQuery(ApiModel):
    business_id: Optional[int] = None
    shop_id: Optional[int] = None
    shop_ids: List[int] = Field(default_factory=list)


def optional_scope(db, payload: dict) -> Optional[List[int]]:
    """Shop ids named by the payload, or ``None`` when it names no scope at all."""
    query = ScopeQuery.model_validate(payload)
    if query.shop_ids:
        return query.shop_ids
    if query.shop_id is None and query.business_id is None:
        return None
    return resolve_scope(db, business_id=query.business_id, shop_id=query.shop_id)


def split_update(payload: dict, *wrappers: str):
    """Accept ``{id, updates}`` / ``{id, data}`` or a flat ``{id, ...fields}`` payload."""
    changes = None
    for key in wrappers or ("updates", "data"):
        if isinstance(payload.get(key), dict):
            changes = dict(payload[key])
            break
    if changes is None:
        changes = {key: value for key, value in payload.items() if key != "id"}
    return payload.get("id"), changes
