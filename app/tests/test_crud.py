import uuid

from sqlalchemy.exc import OperationalError

from app import crud
from app.results import Conflict, Invalid, NotFound, Ok


def test_category_outcomes(db_session):
    created = crud.create_category(db_session, "Engineering")
    assert isinstance(created, Ok)
    assert created.value.title == "Engineering"

    assert isinstance(crud.create_category(db_session, "Engineering"), Conflict)
    assert isinstance(crud.update_category(db_session, 999, "Other"), NotFound)
    assert isinstance(crud.delete_category(db_session, 999), NotFound)

    # a failed insert leaves the session usable
    assert crud.get_category(db_session, created.value.id).title == "Engineering"


def test_job_with_unknown_references_is_invalid(db_session, level):
    result = crud.create_job(
        db_session,
        {"title": "Ghost", "level_id": level.id, "category_id": 12345, "description": "..."},
        approved=False,
    )
    assert isinstance(result, Invalid)


def test_approve_and_reject(db_session, make_job):
    job = make_job(approved=False)
    job_id = job.id
    first = crud.approve_job(db_session, job_id)
    second = crud.approve_job(db_session, job_id)
    assert isinstance(first, Ok) and isinstance(second, Ok)
    assert second.value.is_approved is True

    assert isinstance(crud.reject_job(db_session, job_id), Ok)
    assert crud.get_job(db_session, job_id) is None
    assert isinstance(crud.reject_job(db_session, job_id), NotFound)


def test_list_jobs_count_matches_filters(db_session, make_job):
    for i in range(5):
        make_job(title=f"Engineer {i}")
    make_job(title="Designer")
    rows, total = crud.list_jobs(db_session, page=1, size=2, title="engineer")
    assert total == 5
    assert len(rows) == 2
    job, category, level, company_name = rows[0]
    assert (category, level, company_name) == ("Engineering", "Senior", "Acme Robotics")


def test_save_job_twice_conflicts(db_session, make_job, member_user):
    job = make_job()
    assert isinstance(crud.save_job(db_session, member_user.id, job.id), Ok)
    assert isinstance(crud.save_job(db_session, member_user.id, job.id), Conflict)
    assert isinstance(crud.save_job(db_session, member_user.id, uuid.uuid4()), Invalid)


def test_deleting_job_drops_saved_rows(db_session, make_job, member_user):
    job = make_job()
    crud.save_job(db_session, member_user.id, job.id)
    crud.delete_job(db_session, job.id)
    assert crud.list_saved_jobs(db_session, member_user.id) == []


def test_storage_error_is_generic_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused to db.internal:5432"))

    monkeypatch.setattr(crud, "get_job", broken)
    r = client.get(f"/jobs/{uuid.uuid4()}")
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}


def test_unknown_references_are_named(db_session, level, category):
    user = crud.create_user(db_session, "x@example.com", "x", "password123", category_id=777)
    assert user == Invalid("Unknown job category")

    job = crud.create_job(
        db_session,
        {"title": "Ghost", "level_id": level.id, "category_id": category.id, "description": "...", "company_id": uuid.uuid4()},
        approved=True,
    )
    assert job == Invalid("Unknown company")


def test_register_for_missing_event_is_invalid(db_session, member_user):
    assert crud.register_for_event(db_session, uuid.uuid4(), member_user.id, "attendee") == Invalid("Unknown event")


def test_update_user_applies_only_supplied_fields(db_session, member_user, level):
    crud.update_user(db_session, member_user.id, {"tags": "go", "level_id": level.id})
    result = crud.update_user(db_session, member_user.id, {"full_name": "Only Name"})
    assert isinstance(result, Ok)
    assert result.value.tags == "go"
    assert result.value.level_id == level.id
    assert result.value.full_name == "Only Name"
