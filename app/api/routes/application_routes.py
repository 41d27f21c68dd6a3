"""
Application Routes

POST /application/apply/{job_id} - Apply to a job
GET /application/get - Get my applications
GET /application/{job_id}/applicants - Get a job with its applicants
POST /application/status/{application_id}/update - Update application status
"""

import logging
from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError

from app.core.auth import CurrentUser, get_current_user
from app.services.mongo_service import (
    ApplicationService, JobService, serialize_doc, serialize_docs,
    populate_applications, populate_jobs
)
from app.schemas.schemas import (
    ApplicationOut, ApplicationResponse, ApplicationListResponse, ApplicationStatus,
    ApplicationStatusUpdate, JobOut, JobResponse
)

router = APIRouter(prefix="/application", tags=["Applications"])
logger = logging.getLogger(__name__)


@router.post("/apply/{job_id}", response_model=ApplicationResponse, status_code=201)
async def apply_job(job_id: str, user: CurrentUser = Depends(get_current_user)):
    """Apply to a job. Cannot apply twice to the same job."""
    jobs = JobService()
    job = jobs.get_by_id(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")

    applications = ApplicationService()
    if applications.get_existing(job["_id"], user.user_id):
        raise HTTPException(status_code=400, detail="You have already applied for this job.")

    try:
        application = applications.insert(job["_id"], user.user_id)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="You have already applied for this job.")

    jobs.add_application(job["_id"], application["_id"])

    logger.info("User %s applied to job %s", user.user_id, job["_id"])
    return ApplicationResponse(
        message="Job applied successfully.",
        application=ApplicationOut.model_validate(serialize_doc(application))
    )


@router.get("/get", response_model=ApplicationListResponse)
async def get_applied_jobs(user: CurrentUser = Depends(get_current_user)):
    """Get the current user's applications, newest first, with job and company."""
    applications = ApplicationService().list_by_applicant(user.user_id)
    if not applications:
        raise HTTPException(status_code=404, detail="No applications found.")

    populate_jobs(applications)
    return ApplicationListResponse(
        message="Applications fetched successfully.",
        applications=[ApplicationOut.model_validate(a) for a in serialize_docs(applications)]
    )


@router.get("/{job_id}/applicants", response_model=JobResponse)
async def get_applicants(job_id: str, user: CurrentUser = Depends(get_current_user)):
    """Get a job with every application and applicant populated."""
    job = JobService().get_by_id(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")

    populate_applications(job, with_applicant=True)
    return JobResponse(message="Applicants fetched successfully.", job=JobOut.model_validate(serialize_doc(job)))


@router.post("/status/{application_id}/update", response_model=ApplicationResponse)
async def update_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    user: CurrentUser = Depends(get_current_user)
):
    """Update status of an application (pending, accepted, rejected)."""
    if not data.status:
        raise HTTPException(status_code=400, detail="Status is required.")

    try:
        status = ApplicationStatus(data.status.strip().lower())
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise HTTPException(status_code=400, detail=f"Status must be one of: {allowed}")

    application = ApplicationService().update_status(application_id, status.value)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found.")

    logger.info("User %s set application %s to %s", user.user_id, application_id, status.value)
    return ApplicationResponse(
        message="Status updated successfully.",
        application=ApplicationOut.model_validate(serialize_doc(application))
    )
