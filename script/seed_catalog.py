"""
코스 / 코스 자료 / 이벤트 카탈로그 시드.

이미 같은 이름의 코스, 같은 제목의 이벤트가 있으면 건너뛴다 (재실행 가능).

Usage:
    python -m script.seed_catalog
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import select

from core.config import LOG_FORMAT
from crud.common import course as course_crud
from crud.common import event as event_crud
from database.session import get_session_factory
from models.common.course import Course
from models.common.event import Event
from schemas.common.course import CourseCreate, CourseDocumentCreate
from schemas.common.event import EventCreate

log = logging.getLogger(__name__)

COURSES = [
    {
        "name": "Drone Pilot Fundamentals",
        "description": "Flight principles, airspace rules and pre-flight checklists.",
        "duration": 40,
        "instructors": ["Carlos Mendes"],
        "requirements": ["Minimum age 18"],
        "level": "beginner",
        "rating": Decimal("4.70"),
        "documents": [
            {"name": "Pilot handbook", "type": "material", "file_url": "/docs/pilot-handbook.pdf", "is_required": True},
            {"name": "Final assessment", "type": "assignment", "file_url": "/docs/final-assessment.pdf", "is_required": True},
        ],
    },
    {
        "name": "Agricultural Spraying Operations",
        "description": "Crop spraying missions, calibration and safety procedures.",
        "duration": 60,
        "instructors": ["Ana Ribeiro", "Paulo Lima"],
        "requirements": ["Drone Pilot Fundamentals"],
        "level": "intermediate",
        "rating": Decimal("4.85"),
        "documents": [
            {"name": "Calibration guide", "type": "material", "file_url": "/docs/calibration.pdf", "is_required": False},
            {"name": "Certificate template", "type": "certificate", "file_url": "/docs/certificate.pdf", "is_required": False},
        ],
    },
    {
        "name": "Precision Mapping and Analytics",
        "description": "Photogrammetry, NDVI maps and field reports.",
        "duration": 80,
        "instructors": ["Marina Costa"],
        "requirements": ["Agricultural Spraying Operations"],
        "level": "advanced",
        "rating": Decimal("4.60"),
        "documents": [],
    },
]

EVENTS = [
    {"title": "Spraying season kickoff", "description": "Regional partner meetup.", "days": 14,
     "duration": 120, "type": "workshop", "is_online": False, "max_participants": 40},
    {"title": "Regulation update webinar", "description": "Latest airspace rules.", "days": 30,
     "duration": 60, "type": "webinar", "is_online": True, "max_participants": None},
    {"title": "Partner conference", "description": "Annual partner conference.", "days": 90,
     "duration": 480, "type": "conference", "is_online": False, "max_participants": 300},
]


def seed() -> tuple[int, int]:
    db = get_session_factory()()
    courses = events = 0
    try:
        for row in COURSES:
            exists = db.execute(select(Course.id).where(Course.name == row["name"])).first()
            if exists:
                log.info("skip course %r (exists)", row["name"])
                continue
            documents = row.get("documents", [])
            data = {k: v for k, v in row.items() if k != "documents"}
            CourseCreate.model_validate(data)
            course = course_crud.create_course(db, **data)
            for doc in documents:
                CourseDocumentCreate.model_validate({"course_id": course.id, **doc})
                course_crud.create_course_document(db, course_id=course.id, **doc)
            courses += 1
            log.info("course created id=%s name=%r docs=%d", course.id, course.name, len(documents))

        now = datetime.now(timezone.utc)
        for row in EVENTS:
            exists = db.execute(select(Event.id).where(Event.title == row["title"])).first()
            if exists:
                log.info("skip event %r (exists)", row["title"])
                continue
            data = dict(row)
            data["event_date"] = now + timedelta(days=data.pop("days"))
            EventCreate.model_validate(data)
            event = event_crud.create_event(db, **data)
            events += 1
            log.info("event created id=%s title=%r", event.id, event.title)

        return courses, events
    except Exception:
        db.rollback()
        log.exception("Seed failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    n_courses, n_events = seed()
    print(f"\nDone: {n_courses} courses, {n_events} events created.")
    sys.exit(0)
