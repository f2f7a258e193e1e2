from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response

from reading_room.document import ContentElement, HeadingElement, ImageElement
from reading_room.errors import ImageNotFoundError

from api.dependencies import ReaderState, get_state, require_access

logger = logging.getLogger(__name__)

router = APIRouter(tags=["document"])


def _serialize_element(request: Request, element: ContentElement) -> dict:
    if isinstance(element, ImageElement):
        return {
            "type": "image",
            "id": element.id,
            "url": str(request.url_for("get_image", image_id=element.id)),
        }
    if isinstance(element, HeadingElement):
        return {"type": "heading", "content": element.content, "level": element.level}
    return {"type": "text", "content": element.content}


@router.get("/document")
def get_document(
    request: Request,
    password_hash: Optional[str] = None,
    state: ReaderState = Depends(get_state),
):
    logger.info("GET /document")
    require_access(state, password_hash)
    document = state.document
    return {
        "metadata": asdict(document.get_metadata()),
        "elements": [_serialize_element(request, element) for element in document.get_elements()],
    }


@router.get("/images/{image_id}")
def get_image(
    image_id: str,
    password_hash: Optional[str] = None,
    state: ReaderState = Depends(get_state),
):
    logger.info("GET /images/%s", image_id)
    require_access(state, password_hash)
    try:
        blob = state.document.get_image(image_id)
    except ImageNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return Response(content=blob.data, media_type=blob.media_type)


@router.get("/search")
def search_document(
    query: str = "",
    limit: int = Query(20, ge=1, le=100),
    password_hash: Optional[str] = None,
    state: ReaderState = Depends(get_state),
):
    logger.info("GET /search?query=%s", query)
    require_access(state, password_hash)
    if not query or not query.strip():
        raise HTTPException(status_code=400, detail="Query must not be empty")
    return {"hits": state.indexer.search(query, limit=limit)}
