from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, security
from .results import Conflict, Invalid, NotFound, Ok

TitleModel = type[models.JobCategory] | type[models.JobLevel]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _missing_reference(db: Session, *refs: tuple[type, Any, str]) -> Invalid | None:
    """The first supplied (model, id, label) with no row, as `Invalid`; `None` ids are skipped."""
    for model, row_id, label in refs:
        if row_id is not None and db.get(model, row_id) is None:
            return Invalid(f"Unknown {label}")
    return None


def _commit(db: Session, row: Any, conflict: str) -> Ok | Conflict:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return Conflict(conflict)
    db.refresh(row)
    return Ok(row)


def _paginate(db: Session, stmt: Select, page: int, size: int) -> tuple[list, int]:
    total = db.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    rows = db.execute(stmt.limit(size).offset((page - 1) * size)).all()
    return rows, total


# --- Users ---

def get_user(db: Session, user_id: uuid.UUID) -> models.User | None:
    return db.get(models.User, user_id)

def get_user_by_email(db: Session, email: str) -> models.User | None:
    return db.query(models.User).filter(models.User.email == email).first()

def get_user_by_username(db: Session, username: str) -> models.User | None:
    return db.query(models.User).filter(models.User.username == username).first()

def list_users(db: Session, page: int, size: int) -> tuple[list[models.User], int]:
    rows, total = _paginate(db, select(models.User).order_by(models.User.created_at, models.User.id), page, size)
    return [r[0] for r in rows], total

def create_user(
    db: Session,
    email: str,
    username: str,
    password: str,
    full_name: str | None = None,
    phone_number: str | None = None,
    level_id: int | None = None,
    category_id: int | None = None,
    tags: str | None = None,
    role: str = "user",
) -> Ok[models.User] | Conflict | Invalid:
    invalid = _missing_reference(
        db, (models.JobLevel, level_id, "job level"), (models.JobCategory, category_id, "job category")
    )
    if invalid:
        return invalid
    user = models.User(
        email=email,
        username=username,
        password=security.hash_password(password),
        full_name=full_name,
        phone_number=phone_number,
        level_id=level_id,
        category_id=category_id,
        tags=tags,
        role=role,
    )
    db.add(user)
    return _commit(db, user, "Email or username already registered")

USER_FIELDS = ("full_name", "level_id", "category_id", "tags")

def update_user(db: Session, user_id: uuid.UUID, data: dict[str, Any]) -> Ok[models.User] | NotFound | Conflict | Invalid:
    """Apply only the supplied profile fields."""
    user = get_user(db, user_id)
    if user is None:
        return NotFound("user")
    invalid = _missing_reference(
        db,
        (models.JobLevel, data.get("level_id"), "job level"),
        (models.JobCategory, data.get("category_id"), "job category"),
    )
    if invalid:
        return invalid
    for key in USER_FIELDS:
        if key in data:
            setattr(user, key, data[key])
    user.updated_at = _now()
    return _commit(db, user, "User update conflicts with an existing user")

def get_password_hash(db: Session, user_id: uuid.UUID) -> str | None:
    return db.execute(select(models.User.password).where(models.User.id == user_id)).scalar_one_or_none()

def reset_password(db: Session, user_id: uuid.UUID, password: str) -> Ok[models.User] | NotFound:
    user = get_user(db, user_id)
    if user is None:
        return NotFound("user")
    user.password = security.hash_password(password)
    user.updated_at = _now()
    db.commit()
    db.refresh(user)
    return Ok(user)

def delete_user(db: Session, user_id: uuid.UUID) -> Ok[models.User] | NotFound:
    user = get_user(db, user_id)
    if user is None:
        return NotFound("user")
    db.delete(user)
    db.commit()
    return Ok(user)


# --- Companies ---

def get_company(db: Session, company_id: uuid.UUID) -> models.Company | None:
    return db.get(models.Company, company_id)

def list_companies(db: Session, page: int, size: int) -> tuple[list[models.Company], int]:
    rows, total = _paginate(db, select(models.Company).order_by(models.Company.name, models.Company.id), page, size)
    return [r[0] for r in rows], total

def create_company(db: Session, name: str) -> models.Company:
    company = models.Company(name=name)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


# --- Job categories & levels ---
# Both tables are (id, title) with a unique title, so they share one implementation.

def _get_titled(db: Session, model: TitleModel, row_id: int):
    return db.get(model, row_id)

def _list_titled(db: Session, model: TitleModel, page: int, size: int):
    rows, total = _paginate(db, select(model).order_by(model.id), page, size)
    return [r[0] for r in rows], total

def _create_titled(db: Session, model: TitleModel, title: str, label: str):
    row = model(title=title)
    db.add(row)
    return _commit(db, row, f"{label} already exists")

def _update_titled(db: Session, model: TitleModel, row_id: int, title: str, label: str):
    row = db.get(model, row_id)
    if row is None:
        return NotFound(label.lower())
    row.title = title
    return _commit(db, row, f"A {label.lower()} with this title already exists")

def _delete_titled(db: Session, model: TitleModel, row_id: int, label: str):
    row = db.get(model, row_id)
    if row is None:
        return NotFound(label.lower())
    db.delete(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return Conflict(f"{label} is still referenced by jobs")
    return Ok(row)

def get_category(db: Session, category_id: int) -> models.JobCategory | None:
    return _get_titled(db, models.JobCategory, category_id)

def list_categories(db: Session, page: int, size: int) -> tuple[list[models.JobCategory], int]:
    return _list_titled(db, models.JobCategory, page, size)

def create_category(db: Session, title: str) -> Ok[models.JobCategory] | Conflict:
    return _create_titled(db, models.JobCategory, title, "Job category")

def update_category(db: Session, category_id: int, title: str) -> Ok[models.JobCategory] | NotFound | Conflict:
    return _update_titled(db, models.JobCategory, category_id, title, "Job category")

def delete_category(db: Session, category_id: int) -> Ok[models.JobCategory] | NotFound | Conflict:
    return _delete_titled(db, models.JobCategory, category_id, "Job category")

def get_level(db: Session, level_id: int) -> models.JobLevel | None:
    return _get_titled(db, models.JobLevel, level_id)

def list_levels(db: Session, page: int, size: int) -> tuple[list[models.JobLevel], int]:
    return _list_titled(db, models.JobLevel, page, size)

def create_level(db: Session, title: str) -> Ok[models.JobLevel] | Conflict:
    return _create_titled(db, models.JobLevel, title, "Job level")

def update_level(db: Session, level_id: int, title: str) -> Ok[models.JobLevel] | NotFound | Conflict:
    return _update_titled(db, models.JobLevel, level_id, title, "Job level")

def delete_level(db: Session, level_id: int) -> Ok[models.JobLevel] | NotFound | Conflict:
    return _delete_titled(db, models.JobLevel, level_id, "Job level")


# --- Jobs ---

JOB_FIELDS = (
    "title",
    "level_id",
    "category_id",
    "type_id",
    "location",
    "description",
    "compensation",
    "application_link",
    "is_external",
    "company_id",
    "tags",
)

def get_job(db: Session, job_id: uuid.UUID) -> models.Job | None:
    return db.get(models.Job, job_id)

def list_jobs(
    db: Session,
    page: int,
    size: int,
    category_id: int | None = None,
    level_id: int | None = None,
    company_name: str | None = None,
    title: str | None = None,
    approved: bool = True,
) -> tuple[list[tuple[models.Job, str | None, str | None, str | None]], int]:
    """
    Page through jobs joined with their category, level and company names.

    Every supplied filter narrows the result (they are AND-ed); company name
    and title match as case-insensitive literal substrings, so `%` and `_`
    in a filter only match themselves.
    """
    stmt = (
        select(models.Job, models.JobCategory.title, models.JobLevel.title, models.Company.name)
        .outerjoin(models.JobCategory, models.Job.category_id == models.JobCategory.id)
        .outerjoin(models.JobLevel, models.Job.level_id == models.JobLevel.id)
        .outerjoin(models.Company, models.Job.company_id == models.Company.id)
        .where(models.Job.is_approved.is_(approved))
    )
    if category_id is not None:
        stmt = stmt.where(models.Job.category_id == category_id)
    if level_id is not None:
        stmt = stmt.where(models.Job.level_id == level_id)
    if company_name:
        stmt = stmt.where(models.Company.name.icontains(company_name, autoescape=True))
    if title:
        stmt = stmt.where(models.Job.title.icontains(title, autoescape=True))
    stmt = stmt.order_by(models.Job.created_at.desc(), models.Job.id)

    rows, total = _paginate(db, stmt, page, size)
    return [tuple(r) for r in rows], total

def _job_references(db: Session, data: dict[str, Any]) -> Invalid | None:
    return _missing_reference(
        db,
        (models.JobCategory, data.get("category_id"), "job category"),
        (models.JobLevel, data.get("level_id"), "job level"),
        (models.Company, data.get("company_id"), "company"),
    )

def create_job(db: Session, data: dict[str, Any], approved: bool) -> Ok[models.Job] | Conflict | Invalid:
    invalid = _job_references(db, data)
    if invalid:
        return invalid
    job = models.Job(**{k: data[k] for k in JOB_FIELDS if k in data}, is_approved=approved)
    db.add(job)
    return _commit(db, job, "Job already exists")

def update_job(db: Session, job_id: uuid.UUID, data: dict[str, Any]) -> Ok[models.Job] | NotFound | Conflict | Invalid:
    job = get_job(db, job_id)
    if job is None:
        return NotFound("job")
    invalid = _job_references(db, data)
    if invalid:
        return invalid
    for key in JOB_FIELDS:
        if key in data:
            setattr(job, key, data[key])
    job.updated_at = _now()
    return _commit(db, job, "Job update conflicts with an existing job")

def delete_job(db: Session, job_id: uuid.UUID) -> Ok[models.Job] | NotFound:
    job = get_job(db, job_id)
    if job is None:
        return NotFound("job")
    db.delete(job)
    db.commit()
    return Ok(job)

def approve_job(db: Session, job_id: uuid.UUID) -> Ok[models.Job] | NotFound:
    """Mark a job approved. Approving an already-approved job changes nothing."""
    job = get_job(db, job_id)
    if job is None:
        return NotFound("job")
    if not job.is_approved:
        job.is_approved = True
        job.updated_at = _now()
        db.commit()
        db.refresh(job)
    return Ok(job)

def reject_job(db: Session, job_id: uuid.UUID) -> Ok[models.Job] | NotFound:
    """Rejection removes the posting outright; no record of it is kept."""
    return delete_job(db, job_id)

def save_job(db: Session, user_id: uuid.UUID, job_id: uuid.UUID) -> Ok[models.JobSaved] | Conflict | Invalid:
    invalid = _missing_reference(db, (models.User, user_id, "user"), (models.Job, job_id, "job"))
    if invalid:
        return invalid
    saved = models.JobSaved(user_id=user_id, job_id=job_id)
    db.add(saved)
    return _commit(db, saved, "Job already saved")

def unsave_job(db: Session, user_id: uuid.UUID, job_id: uuid.UUID) -> Ok[models.JobSaved] | NotFound:
    saved = (
        db.query(models.JobSaved)
        .filter(models.JobSaved.user_id == user_id, models.JobSaved.job_id == job_id)
        .first()
    )
    if saved is None:
        return NotFound("saved job")
    db.delete(saved)
    db.commit()
    return Ok(saved)

def list_saved_jobs(db: Session, user_id: uuid.UUID) -> list[models.Job]:
    q = (
        db.query(models.Job)
        .join(models.JobSaved, models.JobSaved.job_id == models.Job.id)
        .filter(models.JobSaved.user_id == user_id)
        .order_by(models.JobSaved.created_at.desc(), models.JobSaved.id.desc())
    )
    return q.all()


# --- Events ---

EVENT_FIELDS = ("title", "type_id", "description", "location", "starts_at", "ends_at")

def get_event(db: Session, event_id: uuid.UUID) -> models.Event | None:
    return db.get(models.Event, event_id)

def list_events(
    db: Session,
    page: int,
    size: int,
    type_id: int | None = None,
    title: str | None = None,
) -> tuple[list[models.Event], int]:
    stmt = select(models.Event)
    if type_id is not None:
        stmt = stmt.where(models.Event.type_id == type_id)
    if title:
        stmt = stmt.where(models.Event.title.icontains(title, autoescape=True))
    stmt = stmt.order_by(models.Event.created_at.desc(), models.Event.id)
    rows, total = _paginate(db, stmt, page, size)
    return [r[0] for r in rows], total

def create_event(db: Session, data: dict[str, Any]) -> models.Event:
    event = models.Event(**{k: data[k] for k in EVENT_FIELDS if k in data})
    db.add(event)
    db.commit()
    db.refresh(event)
    return event

def update_event(db: Session, event_id: uuid.UUID, data: dict[str, Any]) -> Ok[models.Event] | NotFound:
    """Apply only the supplied fields."""
    event = get_event(db, event_id)
    if event is None:
        return NotFound("event")
    for key in EVENT_FIELDS:
        if key in data:
            setattr(event, key, data[key])
    event.updated_at = _now()
    db.commit()
    db.refresh(event)
    return Ok(event)

def delete_event(db: Session, event_id: uuid.UUID) -> Ok[models.Event] | NotFound:
    event = get_event(db, event_id)
    if event is None:
        return NotFound("event")
    db.delete(event)
    db.commit()
    return Ok(event)

def list_registrations(db: Session, event_id: uuid.UUID) -> list[models.Registration]:
    return (
        db.query(models.Registration)
        .filter(models.Registration.event_id == event_id)
        .order_by(models.Registration.created_at, models.Registration.id)
        .all()
    )

def register_for_event(
    db: Session, event_id: uuid.UUID, user_id: uuid.UUID, user_type: str
) -> Ok[models.Registration] | Conflict | Invalid:
    invalid = _missing_reference(db, (models.Event, event_id, "event"), (models.User, user_id, "user"))
    if invalid:
        return invalid
    registration = models.Registration(event_id=event_id, user_id=user_id, user_type=user_type)
    db.add(registration)
    return _commit(db, registration, "Registration conflicts with an existing one")
