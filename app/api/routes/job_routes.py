"""
Job Routes

POST /job/post - Create job posting (authenticated)
GET /job - Search jobs by keyword
GET /job/admin - Jobs created by the caller (authenticated)
GET /job/{job_id} - Get job details with applications
"""

import logging
from fastapi import APIRouter, HTTPException, Depends, Query

from app.core.auth import CurrentUser, get_current_user
from app.services.mongo_service import (
    CompanyService, JobService, serialize_doc, serialize_docs,
    populate_companies, populate_applications
)
from app.schemas.schemas import JobCreate, JobOut, JobResponse, JobListResponse

router = APIRouter(prefix="/job", tags=["Jobs"])
logger = logging.getLogger(__name__)

# Fields of the company shown alongside a job in listings
LISTING_COMPANY_FIELDS = ["name", "location"]


@router.post("/post", response_model=JobResponse, status_code=201)
async def post_job(job: JobCreate, user: CurrentUser = Depends(get_current_user)):
    """Create a new job posting for an existing company."""
    company = CompanyService().get_by_id(job.company_id)
    if not company:
        raise HTTPException(status_code=400, detail="Invalid company ID.")

    created = JobService().insert(
        title=job.title,
        description=job.description,
        requirements=job.requirements,
        salary=job.salary,
        location=job.location,
        job_type=job.job_type,
        experience_level=job.experience,
        position=job.position,
        company_id=company["_id"],
        created_by=user.user_id
    )

    logger.info("User %s posted job %s for company %s", user.user_id, created["_id"], company["_id"])
    return JobResponse(message="New job created successfully.", job=JobOut.model_validate(serialize_doc(created)))


@router.get("", response_model=JobListResponse)
async def get_all_jobs(keyword: str = Query("", description="Search in title and description")):
    """List jobs matching keyword, newest first."""
    jobs = JobService().search(keyword)
    if not jobs:
        raise HTTPException(status_code=404, detail="No jobs found.")

    populate_companies(jobs, LISTING_COMPANY_FIELDS)
    return JobListResponse(
        message="Jobs fetched successfully.",
        jobs=[JobOut.model_validate(j) for j in serialize_docs(jobs)]
    )


@router.get("/admin", response_model=JobListResponse)
async def get_admin_jobs(user: CurrentUser = Depends(get_current_user)):
    """Get all jobs created by the current user, newest first."""
    jobs = JobService().list_by_creator(user.user_id)
    if not jobs:
        raise HTTPException(status_code=404, detail="No jobs found.")

    populate_companies(jobs, LISTING_COMPANY_FIELDS)
    return JobListResponse(
        message="Jobs fetched successfully.",
        jobs=[JobOut.model_validate(j) for j in serialize_docs(jobs)]
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: str):
    """Get details of a specific job, applications included."""
    job = JobService().get_by_id(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")

    populate_applications(job)
    return JobResponse(message="Job fetched successfully.", job=JobOut.model_validate(serialize_doc(job)))
