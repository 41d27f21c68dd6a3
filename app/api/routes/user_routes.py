"""
User Routes

POST /user/register - Register new account (multipart, optional avatar)
POST /user/login - Login and receive the session cookie
POST /user/logout - Clear the session cookie
PUT /user/profile - Update own profile (multipart, optional resume)
GET /user/me - Get current user info
"""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Form, File, UploadFile, Response
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

from app.core.auth import (
    CurrentUser, hash_password, verify_password, create_access_token,
    get_current_user, set_session_cookie, clear_session_cookie
)
from app.services.media_service import MediaStore, get_media_store
from app.services.mongo_service import UserService, serialize_doc
from app.utils.file_upload import read_upload, get_data_uri
from app.schemas.schemas import (
    LoginRequest, MessageResponse, RegisterResponse, UserOut, UserResponse, UserRole, UserSummary,
    normalize_email
)

router = APIRouter(prefix="/user", tags=["Users"])
logger = logging.getLogger(__name__)


def clean_email(email: str) -> str:
    """Normalize an email so it matches what login looks up."""
    try:
        return normalize_email(email)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid email address.")


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    fullname: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None, alias="phoneNumber"),
    password: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    media: MediaStore = Depends(get_media_store)
):
    """
    Register a new account.

    The optional file becomes the profile photo. Login afterwards to get a session.
    """
    if not all([fullname, email, phone_number, password, role]):
        raise HTTPException(status_code=400, detail="All fields are required")

    if role not in {r.value for r in UserRole}:
        raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(r.value for r in UserRole)}")

    email = clean_email(email)
    service = UserService()
    if service.get_by_email(email):
        raise HTTPException(status_code=400, detail="User already exists with this email.")

    profile_photo = ""
    upload = await read_upload(file)
    if upload is not None:
        profile_photo = media.upload(get_data_uri(upload))

    try:
        user = service.insert(
            fullname=fullname,
            email=email,
            phone_number=phone_number,
            password_hash=hash_password(password),
            role=role,
            profile_photo=profile_photo
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists with this email.")

    logger.info("Registered %s account %s", role, email)
    return RegisterResponse(
        message="Account created successfully.",
        user=UserSummary.model_validate(serialize_doc(user))
    )


@router.post("/login", response_model=UserResponse)
async def login(request: LoginRequest, response: Response):
    """
    Login and receive the session token as an httpOnly cookie.

    The requested role must match the account's role.
    """
    user = UserService().get_by_email(request.email)

    if not user or not verify_password(request.password, user["password"]):
        raise HTTPException(status_code=400, detail="Invalid credentials")

    if user["role"] != request.role.value:
        raise HTTPException(status_code=400, detail="Account doesn't exist with current role")

    token = create_access_token(data={"sub": str(user["_id"]), "role": user["role"]})
    set_session_cookie(response, token)

    logger.info("User %s logged in", request.email)
    return UserResponse(
        message=f"Welcome back, {user['fullname']}",
        user=UserOut.model_validate(serialize_doc(user))
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie."""
    clear_session_cookie(response)
    return MessageResponse(message="Logged out successfully.")


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    fullname: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None, alias="phoneNumber"),
    bio: Optional[str] = Form(None),
    skills: Optional[str] = Form(None, description="Comma-separated"),
    file: Optional[UploadFile] = File(None, description="Resume"),
    user: CurrentUser = Depends(get_current_user),
    media: MediaStore = Depends(get_media_store)
):
    """Update own profile. Only provided fields are updated; the file becomes the resume."""
    service = UserService()
    if not service.get_by_id(user.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    updates = {}
    if fullname: updates["fullname"] = fullname
    if email:
        email = clean_email(email)
        owner = service.get_by_email(email)
        if owner and str(owner["_id"]) != user.user_id:
            raise HTTPException(status_code=400, detail="Email is already in use by another account.")
        updates["email"] = email
    if phone_number: updates["phone_number"] = phone_number
    if bio: updates["profile.bio"] = bio
    if skills: updates["profile.skills"] = [s.strip() for s in skills.split(",") if s.strip()]

    upload = await read_upload(file)
    if upload is not None:
        updates["profile.resume"] = media.upload(get_data_uri(upload))
        updates["profile.resume_original_name"] = upload.original_name

    try:
        updated = service.update(user.user_id, updates)
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email is already in use by another account.")

    if not updated:
        raise HTTPException(status_code=404, detail="User not found")

    return UserResponse(
        message="Profile updated successfully",
        user=UserOut.model_validate(serialize_doc(updated))
    )


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser = Depends(get_current_user)):
    """Get current authenticated user's info."""
    doc = UserService().get_by_id(user.user_id)
    if not doc:
        raise HTTPException(status_code=404, detail="User not found")

    return UserResponse(message="User fetched successfully.", user=UserOut.model_validate(serialize_doc(doc)))
