from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    # Unauthenticated
    INVALID_TOKEN = ErrorDefinition("INVALID_TOKEN", "Invalid token", status.HTTP_401_UNAUTHORIZED)
    INVALID_CREDENTIALS = ErrorDefinition(
        "INVALID_CREDENTIALS",
        "Invalid credentials",
        status.HTTP_401_UNAUTHORIZED,
    )
    ACCOUNT_INACTIVE = ErrorDefinition(
        "ACCOUNT_INACTIVE",
        "Account is not active",
        status.HTTP_403_FORBIDDEN,
    )

    # Forbidden
    PERMISSION_DENIED = ErrorDefinition(
        "PERMISSION_DENIED",
        "Permission denied",
        status.HTTP_403_FORBIDDEN,
    )
    STORE_SCOPE_MISMATCH = ErrorDefinition(
        "STORE_SCOPE_MISMATCH",
        "Store scope mismatch",
        status.HTTP_403_FORBIDDEN,
    )
    SELF_DELETE_FORBIDDEN = ErrorDefinition(
        "SELF_DELETE_FORBIDDEN",
        "Cannot delete your own account",
        status.HTTP_403_FORBIDDEN,
    )
    ROLE_CHANGE_FORBIDDEN = ErrorDefinition(
        "ROLE_CHANGE_FORBIDDEN",
        "Only super_admin may change roles",
        status.HTTP_403_FORBIDDEN,
    )

    # Not found (also used for resources of another store)
    NOT_FOUND = ErrorDefinition("NOT_FOUND", "Resource not found", status.HTTP_404_NOT_FOUND)

    # Validation
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_400_BAD_REQUEST,
    )
    INVALID_REFERENCE = ErrorDefinition(
        "INVALID_REFERENCE",
        "Referenced resource does not exist in this store",
        status.HTTP_400_BAD_REQUEST,
    )
    INVALID_STOCK_OPERATION = ErrorDefinition(
        "INVALID_STOCK_OPERATION",
        "Invalid operation",
        status.HTTP_400_BAD_REQUEST,
    )
    STORE_SCOPE_REQUIRED = ErrorDefinition(
        "STORE_SCOPE_REQUIRED",
        "Store scope is required",
        status.HTTP_400_BAD_REQUEST,
    )
    CURRENT_PASSWORD_INVALID = ErrorDefinition(
        "CURRENT_PASSWORD_INVALID",
        "Current password is incorrect",
        status.HTTP_400_BAD_REQUEST,
    )
    PASSWORD_TOO_SHORT = ErrorDefinition(
        "PASSWORD_TOO_SHORT",
        "Password too short",
        status.HTTP_400_BAD_REQUEST,
    )
    INVALID_IMAGE = ErrorDefinition(
        "INVALID_IMAGE",
        "File is not a readable image",
        status.HTTP_400_BAD_REQUEST,
    )
    IMAGE_TOO_LARGE = ErrorDefinition(
        "IMAGE_TOO_LARGE",
        "Image exceeds the maximum upload size",
        status.HTTP_400_BAD_REQUEST,
    )
    UNSUPPORTED_MEDIA_TYPE = ErrorDefinition(
        "UNSUPPORTED_MEDIA_TYPE",
        "Only image files are allowed",
        status.HTTP_400_BAD_REQUEST,
    )

    # Conflict
    CONFLICT = ErrorDefinition("CONFLICT", "Resource already exists", status.HTTP_409_CONFLICT)
    CATEGORY_NOT_EMPTY = ErrorDefinition(
        "CATEGORY_NOT_EMPTY",
        "Category still has products or subcategories",
        status.HTTP_409_CONFLICT,
    )
    STORE_NOT_EMPTY = ErrorDefinition(
        "STORE_NOT_EMPTY",
        "Store still owns data",
        status.HTTP_409_CONFLICT,
    )

    # Upstream
    UPSTREAM_FAILURE = ErrorDefinition(
        "UPSTREAM_FAILURE",
        "Image storage request failed",
        status.HTTP_502_BAD_GATEWAY,
    )
    STORAGE_NOT_CONFIGURED = ErrorDefinition(
        "STORAGE_NOT_CONFIGURED",
        "Image storage is not configured",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )

    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None, message: str | None = None):
        self.error = error
        self.details = details
        self.message = message or error.message
        super().__init__(self.message)


def not_found(resource: str) -> AppError:
    return AppError(ErrorCatalog.NOT_FOUND, message=f"{resource} not found")


def invalid_reference(field: str, value: object) -> AppError:
    return AppError(ErrorCatalog.INVALID_REFERENCE, details={"field": field, "value": str(value)})
