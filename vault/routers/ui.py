from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..config import Settings, get_settings

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
router = APIRouter()

@router.get("/", response_class=HTMLResponse, name="home")
def home(request: Request, settings: Settings = Depends(get_settings)):
    # the page fetches /api/files itself; nothing is listed server-side
    return templates.TemplateResponse(
        request,
        "index.html",
        {"app_name": settings.APP_NAME, "configured": settings.is_configured},
    )
