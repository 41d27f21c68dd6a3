"""
Company Routes

POST /company/register - Register a company owned by the caller
GET /company - Get the caller's companies
GET /company/{company_id} - Get one company
PUT /company/{company_id} - Update company details and logo (multipart)
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Form, File, UploadFile
from pymongo.errors import DuplicateKeyError

from app.core.auth import CurrentUser, get_current_user
from app.core.config import get_settings
from app.services.media_service import MediaStore, get_media_store
from app.services.mongo_service import CompanyService, serialize_doc, serialize_docs
from app.utils.file_upload import read_upload, get_data_uri
from app.schemas.schemas import (
    CompanyRegisterRequest, CompanyOut, CompanyResponse, CompanyListResponse
)

router = APIRouter(prefix="/company", tags=["Companies"])
settings = get_settings()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=CompanyResponse, status_code=201)
async def register_company(data: CompanyRegisterRequest, user: CurrentUser = Depends(get_current_user)):
    """Register a company. Names are unique across the platform."""
    if not data.company_name:
        raise HTTPException(status_code=400, detail="Company name is required.")

    service = CompanyService()
    if service.get_by_name(data.company_name):
        raise HTTPException(status_code=400, detail="You can't register the same company.")

    try:
        company = service.insert(name=data.company_name, user_id=user.user_id)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="You can't register the same company.")

    logger.info("User %s registered company %r", user.user_id, data.company_name)
    return CompanyResponse(
        message="Company registered successfully.",
        company=CompanyOut.model_validate(serialize_doc(company))
    )


@router.get("", response_model=CompanyListResponse)
async def get_companies(user: CurrentUser = Depends(get_current_user)):
    """Get all companies registered by the current user."""
    companies = CompanyService().list_by_owner(user.user_id)
    if not companies:
        raise HTTPException(status_code=404, detail="No companies found for this user.")

    return CompanyListResponse(
        message="Companies fetched successfully.",
        companies=[CompanyOut.model_validate(c) for c in serialize_docs(companies)]
    )


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(company_id: str, user: CurrentUser = Depends(get_current_user)):
    """Get a company by id."""
    company = CompanyService().get_by_id(company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found.")

    return CompanyResponse(
        message="Company fetched successfully.",
        company=CompanyOut.model_validate(serialize_doc(company))
    )


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None, description="Company logo"),
    user: CurrentUser = Depends(get_current_user),
    media: MediaStore = Depends(get_media_store)
):
    """
    Update company information. A logo file is required.

    Any authenticated user may update any company unless
    ENFORCE_COMPANY_OWNERSHIP is enabled.
    """
    upload = await read_upload(file)
    if upload is None:
        raise HTTPException(status_code=400, detail="Logo file is required.")

    service = CompanyService()
    company = service.get_by_id(company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found.")

    if settings.enforce_company_ownership and str(company.get("user_id")) != user.user_id:
        raise HTTPException(status_code=403, detail="You can only update your own companies.")

    if name:
        clash = service.get_by_name(name)
        if clash and clash["_id"] != company["_id"]:
            raise HTTPException(status_code=400, detail="A company with this name already exists.")

    updates = {"logo": media.upload(get_data_uri(upload))}
    if name: updates["name"] = name
    if description: updates["description"] = description
    if website: updates["website"] = website
    if location: updates["location"] = location

    try:
        updated = service.update(company_id, updates)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="A company with this name already exists.")

    if not updated:
        raise HTTPException(status_code=404, detail="Company not found.")

    return CompanyResponse(
        message="Company information updated successfully.",
        company=CompanyOut.model_validate(serialize_doc(updated))
    )
