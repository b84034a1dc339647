"""
Services module for classgallery.

This module contains the service classes that hold the application logic:
- BackendClient: remote students / media / settings tables
- LocalStore: key-string fallback store used without a backend
- StudentService / MediaService: roster and media records in either store
- SettingsService: media host credentials with their fallback chain
- MediaHostService: uploads to the third-party file host
- AuthService: admin and student logins
"""

from .auth import AuthService, Role, SessionUser, get_auth_service
from .backend import BackendClient, get_backend_client, is_backend_configured
from .local_store import LocalStore, get_local_store
from .media import MediaService, filter_by_type, media_stats
from .media_host import MAX_FILE_SIZE, MediaHostService, get_media_host_service
from .settings import SaveResult, SettingsService, get_settings_service
from .students import StudentService, filter_students

__all__ = [
    "AuthService",
    "BackendClient",
    "LocalStore",
    "MAX_FILE_SIZE",
    "MediaHostService",
    "MediaService",
    "Role",
    "SaveResult",
    "SessionUser",
    "SettingsService",
    "StudentService",
    "filter_by_type",
    "filter_students",
    "get_auth_service",
    "get_backend_client",
    "get_local_store",
    "get_media_host_service",
    "get_settings_service",
    "is_backend_configured",
    "media_stats",
]
