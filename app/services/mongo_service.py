"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. users         - Accounts with an embedded profile
2. companies     - Companies registered by recruiters
3. jobs          - Job postings (reference a company and their creator)
4. applications  - A student's application to a job

References are stored as ObjectIds. Population (replacing a reference with
the referenced document) is done here with one $in query per relation.
"""

import re
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from app.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# HELPERS: ObjectId handling and JSON serialization
# ============================================================

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id from a URL/body. Returns None for malformed ids."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document (including nested references) to a JSON-serializable dict."""
    if doc is None:
        return None
    return _serialize_value(doc)


def serialize_docs(docs: Iterable[dict]) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


NEWEST_FIRST = [("created_at", -1), ("_id", -1)]


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """
    Handles user accounts.
    The profile (bio, skills, resume, avatar) is embedded in the user document.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email})

    def get_by_id(self, user_id: str) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def insert(
        self,
        fullname: str,
        email: str,
        phone_number: str,
        password_hash: str,
        role: str,
        profile_photo: str = ""
    ) -> dict:
        """
        Insert a new user.

        Returns:
            The stored document (with _id)
        """
        now = utcnow()
        doc = {
            "fullname": fullname,
            "email": email,
            "phone_number": phone_number,
            "password": password_hash,
            "role": role,
            "profile": {
                "bio": None,
                "skills": [],
                "resume": None,
                "resume_original_name": None,
                "company": None,
                "profile_photo": profile_photo
            },
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def update(self, user_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        """
        Apply a partial update. Keys may use dotted paths ("profile.bio").

        Returns:
            Updated document, or None if the user does not exist
        """
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**fields, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def get_many(self, user_ids: Iterable[Any]) -> Dict[ObjectId, dict]:
        ids = [oid for oid in (to_object_id(u) for u in user_ids) if oid is not None]
        if not ids:
            return {}
        return {doc["_id"]: doc for doc in self.collection.find({"_id": {"$in": ids}})}


# ============================================================
# COMPANIES COLLECTION
# ============================================================

class CompanyService:
    """
    Handles company records.
    Company names are unique across the system (exact match).
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["companies"])

    def get_by_name(self, name: str) -> Optional[dict]:
        return self.collection.find_one({"name": name})

    def get_by_id(self, company_id: str) -> Optional[dict]:
        oid = to_object_id(company_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def insert(self, name: str, user_id: str) -> dict:
        now = utcnow()
        doc = {
            "name": name,
            "description": None,
            "website": None,
            "location": None,
            "logo": None,
            "user_id": to_object_id(user_id),
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def list_by_owner(self, user_id: str) -> List[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return []
        return list(self.collection.find({"user_id": oid}).sort(NEWEST_FIRST))

    def update(self, company_id: str, fields: Dict[str, Any]) -> Optional[dict]:
        """Partial update. Returns updated document or None if not found."""
        oid = to_object_id(company_id)
        if oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**fields, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def get_many(self, company_ids: Iterable[Any], fields: Optional[List[str]] = None) -> Dict[ObjectId, dict]:
        """Fetch companies by id, optionally projected to a few fields."""
        ids = [oid for oid in (to_object_id(c) for c in company_ids) if oid is not None]
        if not ids:
            return {}
        projection = {f: 1 for f in fields} if fields else None
        cursor = self.collection.find({"_id": {"$in": ids}}, projection)
        return {doc["_id"]: doc for doc in cursor}


# ============================================================
# JOBS COLLECTION
# ============================================================

class JobService:
    """
    Handles job postings.
    Search is a case-insensitive literal substring match on title or description.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["jobs"])

    def insert(
        self,
        title: str,
        description: str,
        requirements: List[str],
        salary: float,
        location: str,
        job_type: str,
        experience_level: float,
        position: int,
        company_id: ObjectId,
        created_by: str
    ) -> dict:
        now = utcnow()
        doc = {
            "title": title,
            "description": description,
            "requirements": requirements,
            "salary": salary,
            "location": location,
            "job_type": job_type,
            "experience_level": experience_level,
            "position": position,
            "company": company_id,
            "created_by": to_object_id(created_by),
            "applications": [],
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def search(self, keyword: str = "") -> List[dict]:
        """
        Jobs whose title or description contains keyword (case-insensitive),
        newest first. Regex metacharacters in keyword are matched literally.
        """
        pattern = {"$regex": _literal_pattern(keyword), "$options": "i"}
        query = {"$or": [{"title": pattern}, {"description": pattern}]}
        return list(self.collection.find(query).sort(NEWEST_FIRST))

    def list_by_creator(self, user_id: str) -> List[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return []
        return list(self.collection.find({"created_by": oid}).sort(NEWEST_FIRST))

    def get_by_id(self, job_id: str) -> Optional[dict]:
        oid = to_object_id(job_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def add_application(self, job_id: ObjectId, application_id: ObjectId) -> bool:
        result = self.collection.update_one(
            {"_id": job_id},
            {"$push": {"applications": application_id}, "$set": {"updated_at": utcnow()}}
        )
        return result.modified_count > 0

    def get_many(self, job_ids: Iterable[Any]) -> Dict[ObjectId, dict]:
        ids = [oid for oid in (to_object_id(j) for j in job_ids) if oid is not None]
        if not ids:
            return {}
        return {doc["_id"]: doc for doc in self.collection.find({"_id": {"$in": ids}})}


def _literal_pattern(keyword: str) -> str:
    # re.escape output is valid for MongoDB's PCRE as well
    return re.escape(keyword or "")


# ============================================================
# APPLICATIONS COLLECTION
# ============================================================

class ApplicationService:
    """
    Handles job applications.
    One application per (job, applicant); enforced by a unique index.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])

    def get_existing(self, job_id: ObjectId, applicant_id: str) -> Optional[dict]:
        return self.collection.find_one({"job": job_id, "applicant": to_object_id(applicant_id)})

    def insert(self, job_id: ObjectId, applicant_id: str) -> dict:
        now = utcnow()
        doc = {
            "job": job_id,
            "applicant": to_object_id(applicant_id),
            "status": "pending",
            "created_at": now,
            "updated_at": now
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def list_by_applicant(self, applicant_id: str) -> List[dict]:
        oid = to_object_id(applicant_id)
        if oid is None:
            return []
        return list(self.collection.find({"applicant": oid}).sort(NEWEST_FIRST))

    def update_status(self, application_id: str, status: str) -> Optional[dict]:
        oid = to_object_id(application_id)
        if oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": status, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def get_many(self, application_ids: Iterable[Any]) -> List[dict]:
        """Fetch applications by id, newest first."""
        ids = [oid for oid in (to_object_id(a) for a in application_ids) if oid is not None]
        if not ids:
            return []
        return list(self.collection.find({"_id": {"$in": ids}}).sort(NEWEST_FIRST))


# ============================================================
# POPULATION: replace references with documents
# ============================================================

def populate_companies(jobs: List[dict], fields: Optional[List[str]] = None) -> List[dict]:
    """Replace each job's company reference with the company document (or a projection of it)."""
    companies = CompanyService().get_many([job.get("company") for job in jobs], fields)
    for job in jobs:
        company = companies.get(job.get("company"))
        if company is not None:
            job["company"] = company
    return jobs


def populate_applications(job: dict, with_applicant: bool = False) -> dict:
    """Replace a job's application references with application documents."""
    applications = ApplicationService().get_many(job.get("applications", []))
    if with_applicant:
        users = UserService().get_many([a.get("applicant") for a in applications])
        for application in applications:
            applicant = users.get(application.get("applicant"))
            if applicant is not None:
                application["applicant"] = applicant
    job["applications"] = applications
    return job


def populate_jobs(applications: List[dict]) -> List[dict]:
    """Replace each application's job reference with the job, company included."""
    jobs = JobService().get_many([a.get("job") for a in applications])
    populate_companies(list(jobs.values()))
    for application in applications:
        job = jobs.get(application.get("job"))
        if job is not None:
            application["job"] = job
    return applications
