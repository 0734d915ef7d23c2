import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from starlette.concurrency import run_in_threadpool

from services.diagnosis.engine.mail_template import build_template_vars, find_user_email, render
from services.diagnosis.models.forms import DiagnosisFormEmailSetting
from services.diagnosis.schemas.forms import SubmitRequest
from shared.db import get_db
from shared.mailer import MailerError, send_mail

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/diagnosis", tags=["Diagnosis"])


# --- SUBMIT TRIAL FORM ---
@router.post("/submit")
async def submit_form(
    payload: SubmitRequest,
    db: AsyncSession = Depends(get_db)
):
    school_id = (payload.school_id or "").strip()
    if not school_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="school_id is required")

    result = await db.execute(
        select(DiagnosisFormEmailSetting).where(DiagnosisFormEmailSetting.school_id == school_id)
    )
    setting = result.scalars().first()
    if not setting or not setting.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email settings are not active for this school")

    user_email = find_user_email(payload.fields)
    variables = build_template_vars(
        payload.fields,
        payload.hidden_values,
        school_id,
        datetime.now(timezone.utc).isoformat(),
        user_email,
    )

    try:
        await run_in_threadpool(
            send_mail,
            to=setting.admin_to,
            cc=setting.admin_cc,
            bcc=setting.admin_bcc,
            subject=render(setting.admin_subject, variables),
            body=render(setting.admin_body_template, variables),
            from_email=setting.from_email,
            from_name=setting.from_name,
            reply_to=user_email or setting.reply_to,
        )

        if setting.user_auto_reply_enabled:
            if user_email:
                await run_in_threadpool(
                    send_mail,
                    to=user_email,
                    subject=render(setting.user_subject, variables),
                    body=render(setting.user_body_template, variables),
                    from_email=setting.from_email,
                    from_name=setting.from_name,
                    reply_to=setting.reply_to,
                )
            else:
                logger.info("No user email in submission for %s, auto reply skipped", school_id)
    except MailerError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    logger.info("Form submitted for %s", school_id)
    return {"ok": True}
