from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from klenhub_backend.core.logger import get_component_logger
from .pages import PLACEHOLDER_PAGES, render_placeholder, resolve_title

router = APIRouter(prefix="/admin", tags=["admin"])
logger = get_component_logger("admin")


def _placeholder_response(page: str, request: Request) -> HTMLResponse:
    if page not in PLACEHOLDER_PAGES:
        raise HTTPException(status_code=404, detail="Page not found")
    title = resolve_title(page, request.url.path)
    logger.info("admin page %s rendered as %r", request.url.path, title)
    return HTMLResponse(render_placeholder(title))


@router.get("/{page}", response_class=HTMLResponse)
async def placeholder_page(page: str, request: Request):
    return _placeholder_response(page, request)


@router.get("/{page}/{rest:path}", response_class=HTMLResponse)
async def placeholder_subpage(page: str, rest: str, request: Request):
    return _placeholder_response(page, request)
