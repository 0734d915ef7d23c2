import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from services.chat_logs.analytics import build_dashboard, empty_dashboard
from services.chat_logs.controllers.log_service import load_logs
from services.chat_logs.schemas.dashboard import DashboardOut
from services.faq_management.controllers.faq_service import get_faq
from shared.auth import get_current_user
from shared.db import get_db

load_dotenv()

logger = logging.getLogger(__name__)

APP_VERSION = os.getenv("APP_VERSION", "v0.1.0")
APP_ENV = os.getenv("APP_ENV", "development")

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


# --- ADMIN DASHBOARD (always answers 200) ---
@router.get("", response_model=DashboardOut)
async def read_dashboard(
    school_id: Optional[str] = Query(None),
    days: int = Query(7),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    try:
        logs = await load_logs(db, current_user, school_id)
        faq = await get_faq(db, school_id) if school_id else None
        return build_dashboard(logs, faq.items if faq else [], days, APP_VERSION, APP_ENV)
    except Exception as e:
        logger.exception("Dashboard failed for %s", school_id)
        return empty_dashboard(APP_VERSION, APP_ENV, getattr(e, "detail", None) or str(e) or "unknown")
