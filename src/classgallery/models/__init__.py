"""
Models module for classgallery.

This module contains data models and schemas:
- Student: roster record
- MediaItem: shared photo or video with audience and moderation status
- StorageCredentials: media host destination and upload preset
- DatabaseManager: DuckDB connection for the local fallback store
"""

from .database import DatabaseManager, get_database_manager
from .media import ADMIN_UPLOADER, ALL_STUDENTS, MediaItem, MediaStatus, MediaType, media_type_for_mime
from .schema import get_local_schema_statements, get_remote_schema_statements, validate_schema_compatibility
from .settings import SETTINGS_KEY, StorageCredentials
from .student import Student

__all__ = [
    "ADMIN_UPLOADER",
    "ALL_STUDENTS",
    "DatabaseManager",
    "MediaItem",
    "MediaStatus",
    "MediaType",
    "SETTINGS_KEY",
    "Student",
    "StorageCredentials",
    "get_database_manager",
    "get_local_schema_statements",
    "get_remote_schema_statements",
    "media_type_for_mime",
    "validate_schema_compatibility",
]
