import logging
import os
import tempfile
from datetime import datetime, timedelta
from typing import List, Optional

import openpyxl
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse
from openpyxl.chart import PieChart, Reference
from openpyxl.styles import Alignment, Font
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from starlette.background import BackgroundTask

from services.chat_logs.analytics import group_sessions, parse_timestamp, question_text, top_questions
from services.chat_logs.models.chat_log import ChatLog
from services.chat_logs.schemas.chat_log import (
    ChatLogCreate,
    ChatLogDelete,
    ChatLogDeleted,
    ChatLogOut,
    ChatSessionOut,
)
from services.user_management.permissions import allowed_school_ids, ensure_school_access, is_super_admin
from shared.auth import get_current_super_admin_user, get_current_user
from shared.db import as_utc, get_db, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/logs", tags=["Chat Logs"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


async def load_logs(db: AsyncSession, current_user: dict, school_id: Optional[str] = None):
    """Logs visible to the session, optionally narrowed to one school."""
    stmt = select(ChatLog)
    if school_id:
        await ensure_school_access(db, current_user, school_id)
        stmt = stmt.where(ChatLog.school_id == school_id)
    elif not is_super_admin(current_user):
        stmt = stmt.where(ChatLog.school_id.in_(await allowed_school_ids(db, current_user)))

    result = await db.execute(stmt.order_by(ChatLog.timestamp))
    return result.scalars().all()


# --- STORE LOG (public, called by the chatbot widget) ---
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_log(
    payload: ChatLogCreate,
    db: AsyncSession = Depends(get_db)
):
    school_id = (payload.school or "").strip()
    question = question_text(payload.question).strip()
    session_id = (payload.session_id or "").strip()
    if not school_id or not question or not payload.timestamp or not session_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="school, question, timestamp and session_id are required"
        )

    try:
        timestamp = parse_timestamp(payload.timestamp)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="timestamp must be ISO 8601")

    log = ChatLog(
        school_id=school_id,
        session_id=session_id,
        question=question,
        answer=question_text(payload.answer),
        url=payload.url or "",
        timestamp=timestamp,
    )
    db.add(log)
    await db.commit()
    return {"ok": True, "id": str(log.id)}


# --- LIST LOGS ---
@router.get("", response_model=List[ChatLogOut])
async def list_logs(
    school_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    return await load_logs(db, current_user, school_id)


# --- LOGS GROUPED BY SESSION ---
@router.get("/sessions", response_model=List[ChatSessionOut])
async def list_sessions(
    school_id: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    return group_sessions(await load_logs(db, current_user, school_id))


# --- DELETE A SESSION'S LOGS (super admin only) ---
@router.delete("", response_model=ChatLogDeleted)
async def delete_session_logs(
    payload: ChatLogDelete = Body(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_super_admin_user)
):
    session_id = (payload.session_id or "").strip()
    if not session_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="session_id is required")

    result = await db.execute(delete(ChatLog).where(ChatLog.session_id == session_id))
    await db.commit()

    logger.info("Deleted %d logs of session %s by %s", result.rowcount, session_id, current_user["email"])
    return ChatLogDeleted(session_id=session_id, deleted=result.rowcount)


# --- EXCEL EXPORT ---
@router.get("/export-excel")
async def export_logs_excel(
    school_id: str = Query(...),
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    await ensure_school_access(db, current_user, school_id)

    try:
        from_dt = as_utc(datetime.strptime(from_date, "%Y-%m-%d")) if from_date else utcnow() - timedelta(days=30)
        to_dt = as_utc(datetime.strptime(to_date, "%Y-%m-%d")) + timedelta(days=1) if to_date else utcnow()
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Dates must be YYYY-MM-DD")

    result = await db.execute(
        select(ChatLog)
        .where(
            ChatLog.school_id == school_id,
            ChatLog.timestamp >= from_dt,
            ChatLog.timestamp < to_dt,
        )
        .order_by(ChatLog.timestamp)
    )
    logs = result.scalars().all()

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Chat Logs"

    ws.append(["Timestamp", "Session", "Question", "Answer", "URL"])
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center")

    for log in logs:
        ws.append([
            as_utc(log.timestamp).strftime("%Y-%m-%d %H:%M:%S"),
            log.session_id,
            log.question,
            log.answer,
            log.url,
        ])

    ranked = top_questions(logs)

    # Summary block below the rows
    summary_row = len(logs) + 3
    ws[f"A{summary_row}"] = "Summary"
    ws[f"A{summary_row}"].font = Font(bold=True)
    ws[f"A{summary_row + 1}"] = "Sessions"
    ws[f"B{summary_row + 1}"] = len({log.session_id for log in logs})
    ws[f"A{summary_row + 2}"] = "Interactions"
    ws[f"B{summary_row + 2}"] = len(logs)
    ws[f"A{summary_row + 3}"] = "Top Question"
    ws[f"B{summary_row + 3}"] = ranked[0][0] if ranked else "-"

    if ranked:
        table_row = summary_row + 5
        ws[f"A{table_row}"] = "Question"
        ws[f"B{table_row}"] = "Count"
        ws[f"A{table_row}"].font = Font(bold=True)
        ws[f"B{table_row}"].font = Font(bold=True)
        for offset, (text, count) in enumerate(ranked, start=1):
            ws[f"A{table_row + offset}"] = text
            ws[f"B{table_row + offset}"] = count

        # Pie Chart
        chart = PieChart()
        labels = Reference(ws, min_col=1, min_row=table_row + 1, max_row=table_row + len(ranked))
        data = Reference(ws, min_col=2, min_row=table_row + 1, max_row=table_row + len(ranked))
        chart.add_data(data, titles_from_data=False)
        chart.set_categories(labels)
        chart.title = "Top Questions"
        ws.add_chart(chart, f"D{summary_row + 1}")

    with tempfile.NamedTemporaryFile(delete=False, suffix=".xlsx") as tmp:
        wb.save(tmp.name)
        tmp_path = tmp.name

    logger.info("Exported %d logs for %s", len(logs), school_id)
    return FileResponse(
        tmp_path,
        filename=f"chat_logs_{school_id}.xlsx",
        media_type=XLSX_MEDIA_TYPE,
        background=BackgroundTask(os.unlink, tmp_path),
    )
