"""Pydantic response models for API endpoints."""

from datetime import date

from pydantic import BaseModel

from models.assignments import Overlap, PairResult


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class ProjectCollaborationResponse(BaseModel):
    """Overlap of one employee pair on one project."""

    project_id: int
    employee1_id: int
    employee2_id: int
    days_worked_together: int
    overlap_start: date
    overlap_end: date

    @classmethod
    def from_overlap(cls, overlap: Overlap) -> "ProjectCollaborationResponse":
        return cls(
            project_id=overlap.project_id,
            employee1_id=overlap.employee1_id,
            employee2_id=overlap.employee2_id,
            days_worked_together=overlap.days,
            overlap_start=overlap.overlap_start,
            overlap_end=overlap.overlap_end,
        )


class PairResultResponse(BaseModel):
    """Pair of employees who worked together the longest."""

    employee1_id: int
    employee2_id: int
    total_days_worked_together: int
    common_projects: list[ProjectCollaborationResponse] = []

    @classmethod
    def from_result(cls, result: PairResult) -> "PairResultResponse":
        return cls(
            employee1_id=result.employee1_id,
            employee2_id=result.employee2_id,
            total_days_worked_together=result.total_days_worked_together,
            common_projects=[
                ProjectCollaborationResponse.from_overlap(o) for o in result.common_projects
            ],
        )


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    PARSE_ERROR = "PARSE_ERROR"
    ANALYSIS_ERROR = "ANALYSIS_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
