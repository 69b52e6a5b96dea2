# app/routers.py
from fastapi import FastAPI

from core.config import API_PREFIX

# common
from app.endpoints.common.course import router as common_course
from app.endpoints.common.event import router as common_event

# partner
from app.endpoints.partner.partner_core import router as partner_core
from app.endpoints.partner.student import router as partner_student
from app.endpoints.partner.enrollment import router as partner_enrollment

# user
from app.endpoints.user.account import router as account


def register_routers(app: FastAPI) -> None:
    # ==============================
    # User
    # ==============================
    app.include_router(account,            prefix=f"{API_PREFIX}/auth",        tags=["user/auth"])

    # ==============================
    # Partner
    # ==============================
    app.include_router(partner_core,       prefix=f"{API_PREFIX}/partner",     tags=["partner/core"])
    app.include_router(partner_student,    prefix=f"{API_PREFIX}/students",    tags=["partner/student"])
    app.include_router(partner_enrollment, prefix=f"{API_PREFIX}/enrollments", tags=["partner/enrollment"])

    # ==============================
    # Common
    # ==============================
    app.include_router(common_course,      prefix=f"{API_PREFIX}/courses",     tags=["common/course"])
    app.include_router(common_event,       prefix=f"{API_PREFIX}/events",      tags=["common/event"])
