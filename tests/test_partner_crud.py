from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from crud.partner import partner_core as partner_crud
from crud.user import account as user_crud
from models.partner.partner_core import Partner
from models.user.account import User

from conftest import make_partner, make_user


def test_create_partner_defaults_to_bronze(db_session):
    partner = make_partner(db_session, utm_tag="AGRO-001")

    assert partner.id is not None
    assert partner.utm_tag == "AGRO-001"
    assert partner.classification == "bronze"
    assert partner.total_score == 0
    assert partner.completed_courses == 0
    assert partner.courses_in_progress == 0
    assert partner.completion_rate == Decimal("0")


def test_duplicate_utm_tag_leaves_no_new_row(db_session):
    first = make_partner(db_session, user_id="user-1", utm_tag="AGRO-001", company="First Co")
    make_user(db_session, "user-2")

    with pytest.raises(partner_crud.PartnerConflict):
        partner_crud.create_partner(db_session, user_id="user-2", company="Second Co", utm_tag="AGRO-001")

    count = db_session.execute(select(func.count(Partner.id))).scalar_one()
    assert count == 1

    db_session.expire_all()
    reloaded = partner_crud.get_partner_by_utm_tag(db_session, "AGRO-001")
    assert reloaded.id == first.id
    assert reloaded.company == "First Co"
    assert reloaded.user_id == "user-1"


def test_one_partner_per_user(db_session):
    make_partner(db_session, user_id="user-1", utm_tag="AGRO-001")
    with pytest.raises(partner_crud.PartnerConflict):
        partner_crud.create_partner(db_session, user_id="user-1", company="Again", utm_tag="AGRO-002")


def test_get_partner_by_user_id(db_session):
    partner = make_partner(db_session, user_id="user-9", utm_tag="SKY-9")
    assert partner_crud.get_partner_by_user_id(db_session, "user-9").id == partner.id
    assert partner_crud.get_partner_by_user_id(db_session, "nobody") is None


def test_update_partner_missing_raises(db_session):
    with pytest.raises(partner_crud.PartnerNotFound):
        partner_crud.update_partner(db_session, 999, company="x")


def test_update_partner_rejects_unknown_classification(db_session):
    partner = make_partner(db_session)
    with pytest.raises(partner_crud.PartnerConflict):
        partner_crud.update_partner(db_session, partner.id, classification="platinum")


def test_upsert_user_is_idempotent(db_session):
    make_user(db_session, "user-1", email="a@example.com")
    user = user_crud.upsert_user(db_session, id="user-1", email="a@example.com", first_name="New")

    assert user.first_name == "New"
    assert user.email == "a@example.com"
    assert user_crud.get_by_email(db_session, "a@example.com").id == "user-1"


def test_upsert_user_email_conflict(db_session):
    make_user(db_session, "user-1", email="same@example.com")
    with pytest.raises(user_crud.UserConflict):
        user_crud.upsert_user(db_session, id="user-2", email="same@example.com")


LATER = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_upsert_user_bumps_updated_at(monkeypatch, db_session):
    user = make_user(db_session, "user-1", email="a@example.com")
    created_at = user.created_at.replace(tzinfo=None)
    before = user.updated_at.replace(tzinfo=None)
    monkeypatch.setattr(user_crud, "_utcnow", lambda: LATER)

    user = user_crud.upsert_user(db_session, id="user-1", last_name="Silva")

    assert user.updated_at.replace(tzinfo=None) == LATER.replace(tzinfo=None)
    assert user.updated_at.replace(tzinfo=None) > before
    assert user.created_at.replace(tzinfo=None) == created_at
    # 넘기지 않은 필드는 유지
    assert user.email == "a@example.com"
    assert user.first_name == "Test"


def test_update_partner_bumps_updated_at(monkeypatch, db_session):
    partner = make_partner(db_session)
    before = partner.updated_at.replace(tzinfo=None)
    monkeypatch.setattr(partner_crud, "_utcnow", lambda: LATER)

    partner = partner_crud.update_partner(db_session, partner.id, company="Renamed")

    assert partner.company == "Renamed"
    assert partner.updated_at.replace(tzinfo=None) == LATER.replace(tzinfo=None)
    assert partner.updated_at.replace(tzinfo=None) > before


def test_upsert_user_retries_update_when_first_login_races(monkeypatch, session_factory):
    # 다른 요청이 같은 id 로 먼저 insert 한 상황
    other = session_factory()
    make_user(other, "user-1", email="a@example.com")
    other.close()

    real_get_user = user_crud.get_user
    calls = []

    def stale_get_user(db, user_id):
        calls.append(user_id)
        return None if len(calls) == 1 else real_get_user(db, user_id)

    monkeypatch.setattr(user_crud, "get_user", stale_get_user)

    db = session_factory()
    try:
        user = user_crud.upsert_user(db, id="user-1", first_name="Race")
        assert user.first_name == "Race"
        assert user.email == "a@example.com"
        assert db.execute(select(func.count(User.id))).scalar_one() == 1
    finally:
        db.close()
