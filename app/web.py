from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from models.locations import KNOWN_LOCATIONS
from settings import get_settings


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


router = APIRouter(include_in_schema=False)


@router.get("/", name="dashboard", response_class=HTMLResponse)
async def dashboard(request: Request) -> HTMLResponse:
    settings = get_settings()
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "locations": KNOWN_LOCATIONS,
            "location_config": [
                {"name": location.display_name, "key": location.key, "color": location.color}
                for location in KNOWN_LOCATIONS
            ],
            "refresh_ms": settings.refresh_seconds * 1000,
            "history_limit": settings.history_default_limit,
        },
    )
