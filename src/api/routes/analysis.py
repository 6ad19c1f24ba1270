"""Employee collaboration analysis endpoints."""

import asyncio
import time
from typing import Annotated

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status
from fastapi.responses import PlainTextResponse

from api.logging import RequestLog, log_request
from api.models.responses import ErrorCodes, PairResultResponse
from core.config import MAX_UPLOAD_SIZE_BYTES, REQUEST_LOGGING
from core.errors import AnalysisError, ParseError
from models.assignments import PairResult
from services.collaboration import find_longest_collaborating_pair
from services.csv_parser import parse_assignments_bytes

router = APIRouter(prefix="/api")


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _api_error(status_code: int, error: str, code: str, details: list[str] | None = None):
    return HTTPException(
        status_code=status_code,
        detail={"error": error, "code": code, "details": details or []},
    )


async def _analyze_upload(
    request: Request,
    file: UploadFile | None,
    output_format: str,
) -> PairResult:
    """
    Validate the uploaded CSV, parse it and find the longest collaborating pair.

    Every call is written to the request log, successful or not.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint=request.url.path,
        method="POST",
        client_ip=get_client_ip(request),
        file_name=file.filename if file else None,
        output_format=output_format,
    )

    try:
        # Validate file presence
        if not file or not file.filename:
            raise _api_error(
                status.HTTP_400_BAD_REQUEST,
                "No file uploaded",
                ErrorCodes.INVALID_REQUEST,
                ["Send the CSV as multipart form field 'file'"],
            )

        # Validate file extension
        if not file.filename.lower().endswith(".csv"):
            raise _api_error(
                status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                "File must be a CSV file",
                ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                [f"Received: {file.filename}"],
            )

        file_content = await file.read()
        request_log.file_size_bytes = len(file_content)

        if not file_content:
            raise _api_error(
                status.HTTP_400_BAD_REQUEST,
                "Uploaded file is empty",
                ErrorCodes.INVALID_REQUEST,
            )

        if len(file_content) > MAX_UPLOAD_SIZE_BYTES:
            max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
            raise _api_error(
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                f"File exceeds maximum size of {max_mb} MB",
                ErrorCodes.FILE_TOO_LARGE,
                [f"File size: {len(file_content) / (1024*1024):.1f} MB"],
            )

        records = await asyncio.to_thread(parse_assignments_bytes, file_content)
        request_log.records_parsed = len(records)

        result = await asyncio.to_thread(find_longest_collaborating_pair, records)

        request_log.status_code = 200
        request_log.employee1_id = result.employee1_id
        request_log.employee2_id = result.employee2_id
        request_log.days_worked_together = result.total_days_worked_together
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        return result

    except HTTPException as e:
        request_log.status_code = e.status_code
        if isinstance(e.detail, dict):
            request_log.error_code = e.detail.get("code")
            request_log.error_message = e.detail.get("error")
            for detail in e.detail.get("details", []):
                request_log.details.append(("validation_error", detail))
        else:
            request_log.error_message = str(e.detail)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        raise

    except ParseError as e:
        request_log.status_code = 400
        request_log.error_code = ErrorCodes.PARSE_ERROR
        request_log.error_message = str(e)
        request_log.details.append(("validation_error", str(e)))
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise _api_error(
            status.HTTP_400_BAD_REQUEST,
            f"CSV parsing error: {e}",
            ErrorCodes.PARSE_ERROR,
            [f"Line {e.line_number}: {e.reason}"],
        )

    except AnalysisError as e:
        request_log.status_code = 400
        request_log.error_code = ErrorCodes.ANALYSIS_ERROR
        request_log.error_message = str(e)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise _api_error(
            status.HTTP_400_BAD_REQUEST,
            f"Analysis error: {e}",
            ErrorCodes.ANALYSIS_ERROR,
        )

    except Exception as e:
        # Unexpected errors
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise _api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
            ErrorCodes.INTERNAL_ERROR,
        )

    finally:
        if REQUEST_LOGGING:
            try:
                log_request(request_log)
            except Exception:
                # Don't fail the request if logging fails
                pass


@router.post("/analyze-employees", response_model=PairResultResponse)
async def analyze_employees(
    request: Request,
    file: Annotated[UploadFile | None, File(description="CSV of employee project assignments")] = None,
):
    """
    Find the pair of employees who worked together the longest.

    Accepts a CSV upload with rows of EmployeeID, ProjectID, DateFrom, DateTo
    and returns the pair with the overlaps on each common project.
    """
    result = await _analyze_upload(request, file, "json")
    return PairResultResponse.from_result(result)


@router.post("/analyze-employees/simple", response_class=PlainTextResponse)
async def analyze_employees_simple(
    request: Request,
    file: Annotated[UploadFile | None, File(description="CSV of employee project assignments")] = None,
):
    """Same analysis, answered as 'employee1, employee2, days'."""
    result = await _analyze_upload(request, file, "simple")
    return PlainTextResponse(result.summary())
