import re
from datetime import datetime, timezone

import pytest

from pulsa.crud import certificate_crud
from pulsa.models.certificate_model import Certificate, generate_certificate_code


def test_generated_codes_have_the_expected_shape():
    assert re.fullmatch(r"CERT-[0-9A-F]{8}", generate_certificate_code())
    assert generate_certificate_code("ACME").startswith("ACME-")


def test_issuing_twice_returns_the_stored_certificate(db, learner, course):
    first, created_first = certificate_crud.issue_certificate(db, learner.id, course.id)
    second, created_second = certificate_crud.issue_certificate(db, learner.id, course.id)

    assert created_first is True
    assert created_second is False
    assert second.id == first.id
    assert second.code == first.code
    assert db.query(Certificate).count() == 1


def test_existing_certificate_wins_over_a_late_issuer(db, learner, course):
    # Another request stored the certificate between the completion check and the insert
    db.add(Certificate(user_id=learner.id, course_id=course.id, code="CERT-00000000", issued_at=datetime.now(timezone.utc)))
    db.commit()

    certificate, created = certificate_crud.issue_certificate(db, learner.id, course.id)

    assert created is False
    assert certificate.code == "CERT-00000000"


def test_code_collision_is_retried(db, monkeypatch, learner, other_learner, course):
    codes = iter(["CERT-AAAAAAAA", "CERT-AAAAAAAA", "CERT-BBBBBBBB"])
    monkeypatch.setattr(certificate_crud, "generate_certificate_code", lambda prefix="CERT": next(codes))

    mine, _ = certificate_crud.issue_certificate(db, learner.id, course.id)
    theirs, created = certificate_crud.issue_certificate(db, other_learner.id, course.id)

    assert mine.code == "CERT-AAAAAAAA"
    assert theirs.code == "CERT-BBBBBBBB"
    assert created is True


def test_issuing_gives_up_after_repeated_collisions(db, monkeypatch, learner, other_learner, course):
    monkeypatch.setattr(certificate_crud, "generate_certificate_code", lambda prefix="CERT": "CERT-AAAAAAAA")
    certificate_crud.issue_certificate(db, learner.id, course.id)

    with pytest.raises(RuntimeError):
        certificate_crud.issue_certificate(db, other_learner.id, course.id)
    assert db.query(Certificate).count() == 1


def test_lookup_by_code(db, learner, course):
    certificate, _ = certificate_crud.issue_certificate(db, learner.id, course.id)

    found = certificate_crud.get_certificate_by_code(db, certificate.code)
    assert found.id == certificate.id
    assert found.course.slug == "intro-to-ai"
    assert certificate_crud.get_certificate_by_code(db, "CERT-FFFFFFFF") is None


def test_savepoint_path_returns_existing_certificate(db, learner, course, without_on_conflict):
    db.add(Certificate(user_id=learner.id, course_id=course.id, code="CERT-00000000", issued_at=datetime.now(timezone.utc)))
    db.commit()

    certificate, created = certificate_crud.issue_certificate(db, learner.id, course.id)

    assert created is False
    assert certificate.code == "CERT-00000000"
    assert db.query(Certificate).count() == 1


def test_savepoint_path_retries_code_collisions(db, monkeypatch, learner, other_learner, course, without_on_conflict):
    codes = iter(["CERT-AAAAAAAA", "CERT-AAAAAAAA", "CERT-BBBBBBBB"])
    monkeypatch.setattr(certificate_crud, "generate_certificate_code", lambda prefix="CERT": next(codes))

    mine, _ = certificate_crud.issue_certificate(db, learner.id, course.id)
    theirs, created = certificate_crud.issue_certificate(db, other_learner.id, course.id)

    assert mine.code == "CERT-AAAAAAAA"
    assert theirs.code == "CERT-BBBBBBBB"
    assert created is True
    assert db.query(Certificate).count() == 2
