"""Services package."""
from sipspot.services.asset_loader import LoadResult, MapAssetLoader
from sipspot.services.cafes_api import CafesAPI
from sipspot.services.geo import Marker, bounds, cluster_tiers, project_markers
from sipspot.services.http_client import ApiClient, ApiError, NetworkError
from sipspot.services.users_api import UsersAPI
from sipspot.services.validation import (
    validate_cafe,
    validate_login,
    validate_password_change,
    validate_profile,
    validate_registration,
    validate_review,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "NetworkError",
    "CafesAPI",
    "UsersAPI",
    "LoadResult",
    "MapAssetLoader",
    "Marker",
    "bounds",
    "cluster_tiers",
    "project_markers",
    "validate_cafe",
    "validate_login",
    "validate_password_change",
    "validate_profile",
    "validate_registration",
    "validate_review",
]
