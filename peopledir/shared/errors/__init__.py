from .base import (
    AppError,
    ConflictError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    InvalidCredentialsError,
    NotFoundError,
    RandomnessFailureError,
    StorageUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "ConflictError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "InvalidCredentialsError",
    "NotFoundError",
    "RandomnessFailureError",
    "StorageUnavailableError",
    "UnauthorizedError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
