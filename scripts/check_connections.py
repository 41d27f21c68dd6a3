#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB and Cloudinary are reachable and create indexes.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from app.core.config import get_settings
from app.db.mongodb import test_mongo_connection, init_mongo_indexes
from app.services.media_service import get_media_store


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB PORTAL - CONNECTION CHECK")
    print("=" * 50)

    # MongoDB
    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    MongoDB: CONNECTED")
        init_mongo_indexes()
        print("    Indexes: CREATED")
    else:
        print("    MongoDB: FAILED")

    # Cloudinary (only if credentials are set)
    print("\n[2] Checking Cloudinary...")
    if settings.cloudinary_cloud_name and settings.cloudinary_api_key:
        print(f"    Cloud: {settings.cloudinary_cloud_name}")
        if get_media_store().test_connection():
            print("    Cloudinary: CONNECTED")
        else:
            print("    Cloudinary: FAILED")
    else:
        print("    Cloudinary: credentials not configured, uploads will fail")

    print("\n" + "=" * 50)
    print(f"Environment: {settings.environment} (secure cookies: {settings.cookie_secure})")
    print("=" * 50)


if __name__ == "__main__":
    main()
