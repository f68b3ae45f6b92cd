from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple
from datetime import datetime, timezone
import logging

from pulsa.core.config import Settings
from pulsa.core.database import dialect_insert
from pulsa.models.certificate_model import Certificate, generate_certificate_code
from pulsa.models.user_model import User
from pulsa.services import email_service

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 5


def _insert_certificate(db: Session, user_id: int, course_id: int, code: str, issued_at: datetime) -> None:
    """
    Inserts the certificate unless one already exists for (user, course).
    Raises IntegrityError only for a code collision on dialects with ON CONFLICT.
    """
    stmt = dialect_insert(db, Certificate)
    if stmt is not None:
        stmt = stmt.values(
            user_id=user_id, course_id=course_id, code=code, issued_at=issued_at
        ).on_conflict_do_nothing(index_elements=["user_id", "course_id"])
        db.execute(stmt)
        return

    try:
        with db.begin_nested():
            db.add(Certificate(user_id=user_id, course_id=course_id, code=code, issued_at=issued_at))
    except IntegrityError:
        if get_certificate_for_user_course(db, user_id, course_id) is None:
            raise
        logger.debug(f"Concurrent issuance detected for user_id {user_id}, course_id {course_id}")

def issue_certificate(
    db: Session,
    user_id: int,
    course_id: int,
    code_prefix: str = "CERT",
    app_settings: Optional[Settings] = None,
) -> Tuple[Certificate, bool]:
    """
    Ensures exactly one certificate exists for (user, course).
    Safe to call repeatedly and concurrently: the unique constraint on (user_id, course_id)
    decides the winner, and every caller gets the same stored row back.

    Returns the certificate and whether this call created it.
    """
    logger.debug(f"Ensuring certificate for user_id {user_id}, course_id {course_id}")

    for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
        code = generate_certificate_code(code_prefix)
        try:
            _insert_certificate(db, user_id, course_id, code, datetime.now(timezone.utc))
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Certificate code collision on attempt {attempt} for user_id {user_id}, course_id {course_id}: {e}")
            continue
        except Exception as e:
            db.rollback()
            logger.error(f"Error issuing certificate for user_id {user_id}, course_id {course_id}: {e}", exc_info=True)
            raise

        certificate = (
            db.query(Certificate)
            .populate_existing()
            .filter(Certificate.user_id == user_id, Certificate.course_id == course_id)
            .one()
        )
        created = certificate.code == code
        if created:
            logger.info(f"Certificate issued for user_id {user_id}, course_id {course_id} (ID: {certificate.id}, Code: {certificate.code}).")
            _notify_certificate_issued(db, certificate, app_settings)
        else:
            logger.info(f"Certificate already exists for user_id {user_id}, course_id {course_id} (ID: {certificate.id}).")
        return certificate, created

    raise RuntimeError(f"Could not generate a unique certificate code after {MAX_CODE_ATTEMPTS} attempts.")

def _notify_certificate_issued(db: Session, certificate: Certificate, app_settings: Optional[Settings]) -> None:
    try:
        user = db.query(User).filter(User.id == certificate.user_id).first()
        if not user:
            logger.warning(f"User with ID {certificate.user_id} not found for certificate email.")
            return
        email_service.send_templated_email(
            to_email=user.email,
            subject=f"Your certificate for {certificate.course.title}",
            html_template_name="certificate_issued.html",
            context={
                "user_name": user.name or user.email,
                "course_title": certificate.course.title,
                "certificate_code": certificate.code,
            },
            app_settings=app_settings,
        )
    except Exception as email_exc:
        # The certificate is already stored; email is best effort
        logger.error(f"Failed to send certificate email for certificate ID {certificate.id}: {email_exc}", exc_info=True)

def get_certificate_for_user_course(db: Session, user_id: int, course_id: int) -> Optional[Certificate]:
    logger.debug(f"Fetching certificate for user_id {user_id}, course_id {course_id}")
    return db.query(Certificate).filter(
        Certificate.user_id == user_id,
        Certificate.course_id == course_id
    ).first()

def get_certificate_by_code(db: Session, code: str) -> Optional[Certificate]:
    """Fetches a certificate by its unique code."""
    logger.debug(f"Fetching certificate by code: {code}")
    return (
        db.query(Certificate)
        .options(selectinload(Certificate.course))
        .filter(Certificate.code == code)
        .first()
    )

def get_certificates_for_user(db: Session, user_id: int, skip: int = 0, limit: int = 50) -> List[Certificate]:
    """Fetches all certificates issued to a user, newest first."""
    logger.debug(f"Fetching certificates for user_id {user_id} with skip: {skip}, limit: {limit}")
    return (
        db.query(Certificate)
        .options(selectinload(Certificate.course))
        .filter(Certificate.user_id == user_id)
        .order_by(Certificate.issued_at.desc(), Certificate.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
