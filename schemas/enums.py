# schemas/enums.py
from enum import Enum


# ===== 파트너 등급 =====
class Classification(str, Enum):
    bronze = "bronze"
    silver = "silver"
    gold = "gold"


# ===== 코스 =====
class CourseLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class CourseDocumentType(str, Enum):
    material = "material"
    assignment = "assignment"
    certificate = "certificate"


# ===== 수강 상태 =====
class EnrollmentStatus(str, Enum):
    enrolled = "enrolled"          # 등록만 된 상태
    in_progress = "in_progress"    # 수강 중
    completed = "completed"        # 수료 (terminal)
    dropped = "dropped"            # 중도 포기 (terminal)


# ===== 이벤트 =====
class EventType(str, Enum):
    workshop = "workshop"
    webinar = "webinar"
    conference = "conference"


# ===== 파트너 제출 서류 =====
class DocumentStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
