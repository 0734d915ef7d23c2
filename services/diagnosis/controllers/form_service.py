import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.diagnosis.crud import blank_to_none, require_text
from services.diagnosis.engine.mail_template import (
    DEFAULT_ADMIN_BODY,
    DEFAULT_ADMIN_SUBJECT,
    DEFAULT_USER_BODY,
    DEFAULT_USER_SUBJECT,
    normalize_csv_emails,
)
from services.diagnosis.models.forms import (
    DiagnosisForm,
    DiagnosisFormEmailSetting,
    DiagnosisFormField,
    FormFieldType,
)
from services.diagnosis.schemas.forms import (
    EmailSettingOut,
    EmailSettingUpdate,
    FormFieldOut,
    FormOut,
    FormUpdate,
)
from services.user_management.permissions import ensure_school_access
from shared.auth import get_current_user
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin/diagnosis", tags=["Diagnosis Admin"])

TEMPLATE_FORM_TITLE = "体験レッスンのお申し込み"
TEMPLATE_FIELDS = [
    {"label": "お名前", "type": FormFieldType.TEXT.value, "required": True, "placeholder": "山田 花子"},
    {"label": "メールアドレス", "type": FormFieldType.EMAIL.value, "required": True, "placeholder": "example@example.com"},
    {"label": "電話番号", "type": FormFieldType.TEL.value, "required": False, "placeholder": "090-1234-5678"},
    {"label": "備考", "type": FormFieldType.TEXTAREA.value, "required": False, "placeholder": "ご質問などがあればご記入ください"},
]


async def load_form_fields(db: AsyncSession, form_id: str, active_only: bool = False):
    stmt = select(DiagnosisFormField).where(DiagnosisFormField.form_id == form_id)
    if active_only:
        stmt = stmt.where(DiagnosisFormField.is_active == True)
    result = await db.execute(stmt.order_by(DiagnosisFormField.sort_order))
    return result.scalars().all()


def form_out(form: DiagnosisForm, fields) -> FormOut:
    return FormOut(
        id=form.id,
        school_id=form.school_id,
        is_active=form.is_active,
        title=form.title,
        description=form.description,
        submit_type=form.submit_type,
        submit_url=form.submit_url,
        thanks_type=form.thanks_type,
        thanks_text=form.thanks_text,
        thanks_url=form.thanks_url,
        fields=[FormFieldOut.model_validate(f) for f in fields],
    )


async def get_form(db: AsyncSession, school_id: str):
    result = await db.execute(select(DiagnosisForm).where(DiagnosisForm.school_id == school_id))
    return result.scalars().first()


# --- GET FORM (creates the template on first access) ---
@router.get("/form", response_model=FormOut)
async def read_form(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    form = await get_form(db, school_id)
    if not form:
        form = DiagnosisForm(
            school_id=school_id,
            is_active=True,
            title=TEMPLATE_FORM_TITLE,
            description="ご希望の内容をご入力ください。",
            thanks_text="お申し込みありがとうございました。担当よりご連絡いたします。",
        )
        db.add(form)
        await db.flush()
        for index, field in enumerate(TEMPLATE_FIELDS):
            db.add(DiagnosisFormField(form_id=form.id, sort_order=index, is_active=True, **field))
        await db.commit()
        logger.info("Template form created for %s", school_id)

    return form_out(form, await load_form_fields(db, form.id))


# --- SAVE FORM (fields are replaced wholesale) ---
@router.put("/form", response_model=FormOut)
async def update_form(
    payload: FormUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    result = await db.execute(select(DiagnosisForm).where(DiagnosisForm.id == payload.id))
    form = result.scalars().first()
    if not form:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Form not found")
    await ensure_school_access(db, current_user, form.school_id)

    form.is_active = payload.is_active
    form.title = require_text(payload.title, "title")
    form.description = blank_to_none(payload.description)
    form.submit_type = payload.submit_type
    form.submit_url = blank_to_none(payload.submit_url)
    form.thanks_type = payload.thanks_type
    form.thanks_text = blank_to_none(payload.thanks_text)
    form.thanks_url = blank_to_none(payload.thanks_url)

    labels = [require_text(field.label, "label") for field in payload.fields]

    try:
        await db.execute(delete(DiagnosisFormField).where(DiagnosisFormField.form_id == form.id))
        for index, (label, field) in enumerate(zip(labels, payload.fields)):
            db.add(DiagnosisFormField(
                form_id=form.id,
                label=label,
                type=field.type.value,
                required=field.required,
                placeholder=blank_to_none(field.placeholder),
                options_json=field.options_json,
                sort_order=index,
                is_active=field.is_active,
            ))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Saving form %s failed", form.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Error saving form: {str(e)}")

    logger.info("Form %s saved for %s with %d fields", form.id, form.school_id, len(payload.fields))
    return form_out(form, await load_form_fields(db, form.id))


# --- GET MAIL SETTINGS (creates the template on first access) ---
@router.get("/form-email", response_model=EmailSettingOut)
async def read_form_email(
    school_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    school_id = require_text(school_id, "school_id")
    await ensure_school_access(db, current_user, school_id)

    result = await db.execute(
        select(DiagnosisFormEmailSetting).where(DiagnosisFormEmailSetting.school_id == school_id)
    )
    setting = result.scalars().first()
    if setting:
        return setting

    # notifications go to the logged-in admin until someone changes it
    setting = DiagnosisFormEmailSetting(
        school_id=school_id,
        is_active=True,
        admin_to=current_user["email"],
        admin_subject=DEFAULT_ADMIN_SUBJECT,
        admin_body_template=DEFAULT_ADMIN_BODY,
        user_auto_reply_enabled=True,
        user_subject=DEFAULT_USER_SUBJECT,
        user_body_template=DEFAULT_USER_BODY,
    )
    db.add(setting)
    await db.commit()
    return setting


# --- SAVE MAIL SETTINGS ---
@router.put("/form-email", response_model=EmailSettingOut)
async def update_form_email(
    payload: EmailSettingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    setting_id = (payload.id or "").strip()
    school_id = (payload.school_id or "").strip()
    if not setting_id and not school_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="id or school_id is required")

    admin_to = normalize_csv_emails(payload.admin_to)
    if not admin_to:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="admin_to is required")

    if setting_id:
        result = await db.execute(select(DiagnosisFormEmailSetting).where(DiagnosisFormEmailSetting.id == setting_id))
        setting = result.scalars().first()
        if not setting:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email setting not found")
        await ensure_school_access(db, current_user, setting.school_id)
    else:
        await ensure_school_access(db, current_user, school_id)
        result = await db.execute(
            select(DiagnosisFormEmailSetting).where(DiagnosisFormEmailSetting.school_id == school_id)
        )
        setting = result.scalars().first()
        if not setting:
            setting = DiagnosisFormEmailSetting(school_id=school_id)
            db.add(setting)

    if payload.is_active is not None:
        setting.is_active = payload.is_active
    if payload.user_auto_reply_enabled is not None:
        setting.user_auto_reply_enabled = payload.user_auto_reply_enabled
    setting.from_name = blank_to_none(payload.from_name)
    setting.from_email = blank_to_none(payload.from_email)
    setting.reply_to = blank_to_none(payload.reply_to)
    setting.admin_to = admin_to
    setting.admin_cc = normalize_csv_emails(payload.admin_cc) or None
    setting.admin_bcc = normalize_csv_emails(payload.admin_bcc) or None
    setting.admin_subject = (payload.admin_subject or "").strip() or DEFAULT_ADMIN_SUBJECT
    setting.user_subject = (payload.user_subject or "").strip() or DEFAULT_USER_SUBJECT
    setting.admin_body_template = payload.admin_body_template or setting.admin_body_template or DEFAULT_ADMIN_BODY
    setting.user_body_template = payload.user_body_template or setting.user_body_template or DEFAULT_USER_BODY

    await db.commit()
    logger.info("Form email settings saved for %s", setting.school_id)
    return setting
