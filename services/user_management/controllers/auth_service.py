import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.user_management.models.users import SchoolUser, SchoolUserRole
from services.user_management.permissions import (
    allowed_school_ids,
    is_super_admin,
    is_super_admin_email,
)
from services.user_management.controllers.school_service import load_school_admin_map
from services.user_management.schemas.schools import CheckResponse, InitSchoolsResponse
from services.user_management.schemas.users import LoginRequest, LoginResponse, SessionOut
from shared.auth import (
    clear_session_cookie,
    create_access_token,
    get_current_user,
    set_session_cookie,
    verify_password,
)
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


# --- LOGIN (CREDENTIALS) ---
@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    email = payload.email.lower()
    result = await db.execute(select(SchoolUser).where(SchoolUser.email == email))
    user = result.scalars().first()

    if not user or not user.is_active or not verify_password(payload.password, user.hashed_password):
        logger.info("Login failed for %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    # The registry decides the role, so promotions and removals apply on next login
    if await is_super_admin_email(db, email):
        role = SchoolUserRole.SUPERADMIN
    else:
        role = SchoolUserRole.SCHOOL_ADMIN

    token_data = {
        "sub": user.email,
        "role": role.value,
        "user_id": str(user.id),
        "school_id": user.school_id
    }
    access_token = create_access_token(token_data)
    set_session_cookie(response, access_token)

    logger.info("User %s logged in as %s", email, role.value)
    return LoginResponse(
        name=user.name,
        email=user.email,
        role=role.value,
        school_id=user.school_id,
        access_token=access_token
    )


# --- LOGOUT ---
@router.post("/logout")
async def logout(response: Response):
    clear_session_cookie(response)
    return {"ok": True}


# --- CURRENT SESSION ---
@router.get("/session", response_model=SessionOut)
async def read_session(current_user: dict = Depends(get_current_user)):
    return SessionOut(**current_user)


# --- CHECK ADMIN ---
@router.get("/check-admin", response_model=CheckResponse)
async def check_admin(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    if is_super_admin(current_user):
        return CheckResponse(ok=True)
    return CheckResponse(ok=len(await allowed_school_ids(db, current_user)) > 0)


# --- CHECK SUPER ADMIN ---
@router.get("/check-super-admin", response_model=CheckResponse)
async def check_super_admin(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    return CheckResponse(ok=await is_super_admin_email(db, current_user["email"]))


# --- INIT (SCHOOLS VISIBLE TO THE SESSION) ---
@router.get("/init", response_model=InitSchoolsResponse)
async def init_schools(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    schools = await load_school_admin_map(db)
    super_admin = is_super_admin(current_user)
    if not super_admin:
        visible = set(await allowed_school_ids(db, current_user))
        schools = {school_id: emails for school_id, emails in schools.items() if school_id in visible}

    return InitSchoolsResponse(ok=True, is_super_admin=super_admin, schools=schools)
