from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import ReaderState, get_state, require_access
from api.schemas import PositionUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["positions"])


@router.get("/positions")
def list_positions(
    password_hash: Optional[str] = None,
    state: ReaderState = Depends(get_state),
):
    logger.info("GET /positions")
    require_access(state, password_hash)
    users = state.registry.snapshot()
    # Identity is only flattened into "name:color" here, at the wire boundary.
    # Names or colors containing ":" can flatten to the same key; the last one wins.
    payload = {}
    for identity, user in users.items():
        key = identity.wire_key()
        if key in payload:
            logger.warning("Readers %s share the wire key %s; only one is listed", identity, key)
        payload[key] = asdict(user)
    return {"users": payload}


@router.post("/update_position")
def update_position(
    update: PositionUpdate,
    state: ReaderState = Depends(get_state),
):
    logger.info(
        "POST /update_position from %s at ¶%s-%s",
        update.name,
        update.position.start_element,
        update.position.end_element,
    )
    require_access(state, update.password_hash)
    state.registry.upsert(update.identity, update.position.to_position())
    return {"status": "ok"}
