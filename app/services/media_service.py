"""
Media Store Client - Cloudinary uploads for logos, avatars and resumes.

The API never serves binary assets itself. Uploads are handed to Cloudinary
as data URIs and the returned secure_url is persisted on the owning record.
"""
import logging
import cloudinary
import cloudinary.api
import cloudinary.uploader

from app.core.config import get_settings
from app.core.exceptions import MediaUploadFailed
from app.utils.file_upload import DataUri

settings = get_settings()
logger = logging.getLogger(__name__)


class MediaStore:
    """
    Wrapper for the Cloudinary upload API.
    """

    def __init__(self):
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True
        )

    def upload(self, data_uri: DataUri) -> str:
        """
        Upload a data URI and return its public URL.

        resource_type="auto" lets Cloudinary accept PDFs (resumes) as well as images.
        """
        try:
            response = cloudinary.uploader.upload(data_uri.content, resource_type="auto")
        except Exception as exc:
            logger.error("Cloudinary upload failed (%s): %s", data_uri.mimetype, exc)
            raise MediaUploadFailed(str(exc)) from exc

        url = response.get("secure_url")
        if not url:
            raise MediaUploadFailed("Media store returned no URL")
        logger.info("Uploaded %s to media store: %s", data_uri.mimetype, url)
        return url

    def test_connection(self) -> bool:
        """Test if Cloudinary credentials are valid"""
        try:
            return cloudinary.api.ping().get("status") == "ok"
        except Exception as e:
            logger.warning("Cloudinary connection failed: %s", e)
            return False


# Singleton instance
_media_store: MediaStore = None


def get_media_store() -> MediaStore:
    """Get or create the media store client (singleton pattern). Used as a FastAPI dependency."""
    global _media_store
    if _media_store is None:
        _media_store = MediaStore()
    return _media_store
