"""
Job Portal
Recruiters register companies and post jobs; students search and apply.

Architecture:
- MongoDB: users, companies, jobs, applications
- Cloudinary: uploaded logos, avatars and resumes
- FastAPI: REST API consumed by the single-page UI
"""

__version__ = "1.0.0"
