"""API Pydantic models."""

from .responses import (
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    PairResultResponse,
    ProjectCollaborationResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "PairResultResponse",
    "ProjectCollaborationResponse",
]
