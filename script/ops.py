"""
운영자 전용 작업 (API 로 노출하지 않는 것들).

  classify           파트너 등급 / 점수 변경
  issue-certificate  수료증 발급 (파트너가 신청한 건만)
  mark-attended      이벤트 참석 처리
  deactivate-course  코스 비활성화 (목록에서 숨김, 상세/기존 수강은 유지)
  approve-document   제출 서류 승인
  reject-document    제출 서류 반려

Usage:
    python -m script.ops classify --utm AGRO-001 --tier silver [--score 120]
    python -m script.ops issue-certificate --enrollment 42
    python -m script.ops mark-attended --registration 7
    python -m script.ops deactivate-course --course 3
    python -m script.ops approve-document --document 5
    python -m script.ops reject-document --document 6
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from core.config import LOG_FORMAT
from crud.common import course as course_crud
from crud.partner import event as registration_crud
from crud.partner import partner_core as partner_crud
from database.session import get_session_factory
from schemas.enums import Classification, DocumentStatus
from service.partner.enrollment import issue_certificate

log = logging.getLogger(__name__)


def classify(db: Session, *, utm_tag: str, tier: str, score: Optional[int] = None) -> None:
    partner = partner_crud.get_partner_by_utm_tag(db, utm_tag)
    if partner is None:
        raise partner_crud.PartnerNotFound(f"partner with utm tag {utm_tag!r} not found")

    fields = {"classification": Classification(tier).value}
    if score is not None:
        fields["total_score"] = score
    before = partner.classification
    partner_crud.update_partner(db, partner.id, **fields)
    log.info("partner %s classification %s -> %s", partner.id, before, fields["classification"])


def mark_attended(db: Session, *, registration_id: int) -> None:
    if registration_crud.set_attended(db, registration_id) is None:
        raise LookupError(f"registration {registration_id} not found")
    log.info("registration %s marked attended", registration_id)


def deactivate_course(db: Session, *, course_id: int) -> None:
    course_crud.deactivate_course(db, course_id)
    log.info("course %s deactivated", course_id)


def set_document_status(db: Session, *, document_id: int, status: str) -> None:
    value = DocumentStatus(status).value
    if partner_crud.set_document_status(db, document_id, value) is None:
        raise LookupError(f"document {document_id} not found")
    log.info("document %s marked %s", document_id, value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="script.ops", description="operator tasks")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("classify")
    p.add_argument("--utm", required=True, help="partner utm tag")
    p.add_argument("--tier", required=True, choices=[c.value for c in Classification])
    p.add_argument("--score", type=int, default=None)

    p = sub.add_parser("issue-certificate")
    p.add_argument("--enrollment", type=int, required=True)

    p = sub.add_parser("mark-attended")
    p.add_argument("--registration", type=int, required=True)

    p = sub.add_parser("deactivate-course")
    p.add_argument("--course", type=int, required=True)

    for name in ("approve-document", "reject-document"):
        p = sub.add_parser(name)
        p.add_argument("--document", type=int, required=True)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    db = get_session_factory()()
    try:
        if args.command == "classify":
            classify(db, utm_tag=args.utm, tier=args.tier, score=args.score)
        elif args.command == "issue-certificate":
            issue_certificate(db, args.enrollment)
        elif args.command == "mark-attended":
            mark_attended(db, registration_id=args.registration)
        elif args.command == "deactivate-course":
            deactivate_course(db, course_id=args.course)
        elif args.command == "approve-document":
            set_document_status(db, document_id=args.document, status=DocumentStatus.approved.value)
        elif args.command == "reject-document":
            set_document_status(db, document_id=args.document, status=DocumentStatus.rejected.value)
        return 0
    except Exception:
        db.rollback()
        log.exception("%s failed", args.command)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    sys.exit(main())
