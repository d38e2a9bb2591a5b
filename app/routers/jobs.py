import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import crud
from ..auth import Principal, get_principal, require_admin, require_principal
from ..database import get_db
from ..results import raise_for
from ..schemas import JobAction, JobCreate, JobListItem, JobOut, JobUpdate, Page, SavedJobOut, SaveJobResponse
from ..validators import JobFilters, PageParams, job_filter_params, pagination_params, parse_uuid

router = APIRouter(prefix="/jobs", tags=["jobs"])
logger = logging.getLogger(__name__)


def _job_page(db: Session, params: PageParams, filters: JobFilters, approved: bool) -> dict:
    rows, total = crud.list_jobs(
        db,
        params.page,
        params.size,
        category_id=filters.category_id,
        level_id=filters.level_id,
        company_name=filters.company_name,
        title=filters.title,
        approved=approved,
    )
    items = [
        {"job": job, "category": category, "level": level, "company_name": company_name}
        for job, category, level, company_name in rows
    ]
    return params.build(items, total)


@router.get("", response_model=Page[JobListItem])
def list_jobs(
    params: PageParams = Depends(pagination_params),
    filters: JobFilters = Depends(job_filter_params),
    db: Session = Depends(get_db),
):
    """Approved jobs only. An empty page is still a 200."""
    return _job_page(db, params, filters, approved=True)


@router.get("/pending", response_model=Page[JobListItem])
def list_pending_jobs(
    params: PageParams = Depends(pagination_params),
    filters: JobFilters = Depends(job_filter_params),
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    """The moderation queue: postings still waiting for an admin decision."""
    return _job_page(db, params, filters, approved=False)


@router.get("/{job_id}", response_model=JobOut)
def get_job(job_id: str, db: Session = Depends(get_db)):
    job = crud.get_job(db, parse_uuid(job_id, "job"))
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return job


@router.post("", response_model=JobAction, status_code=status.HTTP_202_ACCEPTED)
def submit_job(
    payload: JobCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_principal),
):
    """
    Create a job posting.

    Postings from admins are published immediately (201); everyone else's
    enter the approval queue (202) until an admin approves or rejects them.
    """
    approved = principal.is_admin
    result = crud.create_job(db, payload.model_dump(), approved=approved)
    raise_for(result, "Job not found")
    job = result.value
    if approved:
        logger.info("Job %s created and published by admin %s", job.id, principal.id)
        body = JobAction(message="Job created successfully", job_id=job.id)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=body.model_dump(mode="json", by_alias=True))
    logger.info("Job %s submitted for approval by %s", job.id, principal.id)
    return JobAction(message="Job submitted for approval", job_id=job.id)


@router.put("/{job_id}", response_model=JobOut)
def update_job(
    job_id: str,
    payload: JobUpdate,
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    result = crud.update_job(db, parse_uuid(job_id, "job"), payload.model_dump())
    raise_for(result, "Job not found")
    return result.value


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job(job_id: str, db: Session = Depends(get_db), principal: Principal = Depends(require_admin)):
    result = crud.delete_job(db, parse_uuid(job_id, "job"))
    raise_for(result, "Job not found")
    logger.info("Job %s deleted by admin %s", job_id, principal.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{job_id}/approve", response_model=JobAction)
def approve_job(job_id: str, db: Session = Depends(get_db), principal: Principal = Depends(require_admin)):
    result = crud.approve_job(db, parse_uuid(job_id, "job"))
    raise_for(result, "Job not found")
    logger.info("Job %s approved by admin %s", result.value.id, principal.id)
    return JobAction(message="Job approved successfully", job_id=result.value.id)


@router.post("/{job_id}/reject", response_model=JobAction)
def reject_job(job_id: str, db: Session = Depends(get_db), principal: Principal = Depends(require_admin)):
    result = crud.reject_job(db, parse_uuid(job_id, "job"))
    raise_for(result, "Job not found")
    logger.info("Job %s rejected by admin %s", result.value.id, principal.id)
    return JobAction(message="Job rejected successfully", job_id=result.value.id)


@router.post("/{job_id}/save", response_model=SaveJobResponse)
def save_job(
    job_id: str,
    db: Session = Depends(get_db),
    principal: Principal | None = Depends(get_principal),
):
    if principal is None or not job_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="bad request")
    job = crud.get_job(db, parse_uuid(job_id, "job"))
    if job is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    result = crud.save_job(db, principal.id, job.id)
    raise_for(result, "Job not found")
    return SaveJobResponse(saved_job=SavedJobOut.model_validate(result.value), message="Job saved successfully")


@router.delete("/{job_id}/save", status_code=status.HTTP_204_NO_CONTENT)
def unsave_job(
    job_id: str,
    db: Session = Depends(get_db),
    principal: Principal | None = Depends(get_principal),
):
    if principal is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="bad request")
    result = crud.unsave_job(db, principal.id, parse_uuid(job_id, "job"))
    raise_for(result, "Saved job not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
