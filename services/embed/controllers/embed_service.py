from pathlib import Path

from fastapi import APIRouter, Query, Request
from fastapi.responses import FileResponse
from fastapi.templating import Jinja2Templates

EMBED_DIR = Path(__file__).resolve().parent.parent
THEMES = ("light", "dark")

templates = Jinja2Templates(directory=str(EMBED_DIR / "templates"))

router = APIRouter(tags=["Embed"])


def _theme(value: str) -> str:
    return value if value in THEMES else "light"


# --- LOADER SCRIPT ---
@router.get("/embed.js")
async def embed_script():
    return FileResponse(
        EMBED_DIR / "static" / "embed.js",
        media_type="application/javascript",
        headers={"Cache-Control": "public, max-age=300"},
    )


# --- IFRAME PAGES ---
@router.get("/embed/chatbot")
async def embed_chatbot(
    request: Request,
    school: str = Query(""),
    theme: str = Query("light")
):
    return templates.TemplateResponse(
        request,
        "chatbot.html",
        {"school": school.strip(), "theme": _theme(theme)},
    )


@router.get("/embed/diagnosis")
async def embed_diagnosis(
    request: Request,
    school: str = Query("")
):
    return templates.TemplateResponse(request, "diagnosis.html", {"school": school.strip()})
