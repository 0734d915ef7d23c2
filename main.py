import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from services.user_management.controllers.auth_service import router as auth_router
from services.user_management.controllers.super_admin_service import router as superadmin_router
from services.user_management.controllers.school_service import router as school_router
from services.user_management.controllers.user_service import router as user_router
from services.faq_management.controllers.faq_service import router as faq_router
from services.diagnosis.controllers.campus_service import router as campus_router
from services.diagnosis.controllers.course_service import router as course_router
from services.diagnosis.controllers.genre_service import router as genre_router
from services.diagnosis.controllers.lifestyle_service import router as lifestyle_router
from services.diagnosis.controllers.instructor_service import router as instructor_router
from services.diagnosis.controllers.schedule_service import router as schedule_router
from services.diagnosis.controllers.result_admin_service import router as result_admin_router
from services.diagnosis.controllers.form_service import router as form_router
from services.diagnosis.controllers.public_service import router as diagnosis_public_router
from services.diagnosis.controllers.result_service import router as diagnosis_result_router
from services.diagnosis.controllers.submit_service import router as diagnosis_submit_router
from services.chat_logs.controllers.log_service import router as log_router
from services.chat_logs.controllers.dashboard_service import router as dashboard_router
from services.embed.controllers.embed_service import router as embed_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "false").lower() == "true"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if AUTO_CREATE_TABLES:
        from create_db import init_models
        await init_models()
    yield


app = FastAPI(title="SchoolBot Admin Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def health_check():
    return {"status": "SchoolBot Admin Backend is running ✅"}


app.include_router(auth_router)
app.include_router(superadmin_router)
app.include_router(school_router)
app.include_router(user_router)
app.include_router(faq_router)
app.include_router(campus_router)
app.include_router(course_router)
app.include_router(genre_router)
app.include_router(lifestyle_router)
app.include_router(instructor_router)
app.include_router(schedule_router)
app.include_router(result_admin_router)
app.include_router(form_router)
app.include_router(diagnosis_public_router)
app.include_router(diagnosis_result_router)
app.include_router(diagnosis_submit_router)
app.include_router(log_router)
app.include_router(dashboard_router)
app.include_router(embed_router)
