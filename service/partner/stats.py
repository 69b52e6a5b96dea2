# service/partner/stats.py
"""
수강 기록 집계 (순수 함수).

DB 접근 없음. status / progress / grade 속성을 가진 객체 시퀀스만 받는다
(ORM Enrollment, 테스트용 SimpleNamespace 모두 가능).
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Sequence

from core.config import RATE_PRECISION
from schemas.enums import Classification, EnrollmentStatus

_HUNDRED = Decimal("100")
_ZERO = Decimal("0")

# 등급별 표시용 진행률. 실제 지표가 아닌 고정 계단값
TIER_PROGRESS = {
    Classification.bronze: 33,
    Classification.silver: 66,
    Classification.gold: 100,
}

NEXT_TIER = {
    Classification.bronze: Classification.silver,
    Classification.silver: Classification.gold,
    Classification.gold: None,
}

# 다음 등급 안내 문구. 화면 표시용이며 어떤 코드도 이 조건으로 승급시키지 않는다
PROMOTION_CRITERIA = {
    Classification.bronze: [
        "Complete 2 more courses",
        "Keep an average grade of at least 8.0",
        "Attend 3 events",
    ],
    Classification.silver: [
        "Complete 2 more courses",
        "Keep an average grade of at least 8.0",
        "Attend 3 events",
    ],
    Classification.gold: [],
}


def _d(v: Any) -> Decimal:
    return Decimal(str(v if v is not None else 0))


def _status(e: Any) -> str:
    s = getattr(e, "status", None)
    return s.value if isinstance(s, EnrollmentStatus) else str(s)


def _tier(tier: Any) -> Classification:
    # 알 수 없는 등급은 ValueError
    return tier if isinstance(tier, Classification) else Classification(tier)


def quantize(v: Decimal, places: int = RATE_PRECISION) -> Decimal:
    return v.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


# ==============================
# 지표
# ==============================
def completion_rate(enrollments: Sequence[Any]) -> Decimal:
    """completed / total × 100. 비어 있으면 0."""
    total = len(enrollments)
    if total == 0:
        return _ZERO
    completed = sum(1 for e in enrollments if _status(e) == EnrollmentStatus.completed.value)
    return Decimal(completed) * _HUNDRED / Decimal(total)


def average_progress(enrollments: Sequence[Any]) -> Decimal:
    """progress 평균 (None 은 0 취급). 비어 있으면 0."""
    if not enrollments:
        return _ZERO
    total = sum((_d(getattr(e, "progress", None)) for e in enrollments), _ZERO)
    return total / Decimal(len(enrollments))


def average_grade(enrollments: Iterable[Any]) -> Optional[Decimal]:
    """성적 있는 수강만 평균. 성적이 하나도 없으면 None (0점과 구분)."""
    grades = [_d(e.grade) for e in enrollments if getattr(e, "grade", None) is not None]
    if not grades:
        return None
    return sum(grades, _ZERO) / Decimal(len(grades))


def tier_progress(tier: Any) -> int:
    return TIER_PROGRESS[_tier(tier)]


def next_tier(tier: Any) -> Optional[Classification]:
    return NEXT_TIER[_tier(tier)]


def promotion_criteria(tier: Any) -> list[str]:
    return list(PROMOTION_CRITERIA[_tier(tier)])


# ==============================
# 요약
# ==============================
@dataclass(frozen=True)
class EnrollmentSummary:
    total: int
    enrolled: int
    in_progress: int
    completed: int
    dropped: int
    completion_rate: Decimal
    average_progress: Decimal
    average_grade: Optional[Decimal]
    graded_count: int

    @property
    def open_count(self) -> int:
        # 진행 중 카운터 기준: enrolled + in_progress
        return self.enrolled + self.in_progress


def summarize(enrollments: Sequence[Any]) -> EnrollmentSummary:
    counts = {s.value: 0 for s in EnrollmentStatus}
    for e in enrollments:
        counts[_status(e)] = counts.get(_status(e), 0) + 1

    avg_grade = average_grade(enrollments)
    return EnrollmentSummary(
        total=len(enrollments),
        enrolled=counts[EnrollmentStatus.enrolled.value],
        in_progress=counts[EnrollmentStatus.in_progress.value],
        completed=counts[EnrollmentStatus.completed.value],
        dropped=counts[EnrollmentStatus.dropped.value],
        completion_rate=quantize(completion_rate(enrollments)),
        average_progress=quantize(average_progress(enrollments)),
        average_grade=quantize(avg_grade) if avg_grade is not None else None,
        graded_count=sum(1 for e in enrollments if getattr(e, "grade", None) is not None),
    )


def completion_rate_from_counts(counts: dict[str, int]) -> Decimal:
    """status 별 count dict 기준 완료율 (DB 집계 결과용), 2자리 반올림."""
    total = sum(counts.values())
    if total == 0:
        return quantize(_ZERO)
    completed = counts.get(EnrollmentStatus.completed.value, 0)
    return quantize(Decimal(completed) * _HUNDRED / Decimal(total))
