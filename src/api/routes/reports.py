"""Weekly hours report endpoint."""

import asyncio
import json
import time
from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import Response

from api.dependencies import verify_api_key
from api.logging import RequestLog, log_request
from api.models.responses import ErrorCodes, HoursReportResponse
from core import config
from core.aggregation import aggregate_weekly_hours
from core.taxonomy import load_client_rules
from models.reports import Report
from services.audit import parse_snapshot_events
from services.reports import format_csv, report_document

router = APIRouter(prefix="/v1")

OUTPUT_FORMATS = {"json", "csv"}


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _build_report(file_content: bytes) -> tuple[Report, int]:
    """
    Decode an uploaded snapshot and aggregate it.

    Runs in a worker thread. The taxonomy is loaded first so configuration
    problems surface before the upload is parsed.
    """
    rules = load_client_rules(config.CLIENTS_PATH)

    try:
        payload = json.loads(file_content)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Snapshot is not valid JSON: {e}") from e

    events = parse_snapshot_events(payload)
    return aggregate_weekly_hours(events, rules), len(events)


@router.post("/reports/hours")
async def create_hours_report(
    request: Request,
    file: Annotated[
        UploadFile, File(description="Calendar audit snapshot (events.json)")
    ],
    output_format: Annotated[
        str, Form(alias="format", description="Response format: json or csv")
    ] = "json",
    _api_key: str = Depends(verify_api_key),
):
    """
    Generate the weekly client hours report from an uploaded audit snapshot.

    Returns the nested report document, or CSV rows when format=csv.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/reports/hours",
        method="POST",
        client_ip=get_client_ip(request),
        file_name=file.filename,
        output_format=output_format,
    )

    try:
        if not file or not file.filename:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "No file provided",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": [],
                },
            )

        if output_format not in OUTPUT_FORMATS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "Unsupported output format",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": [f"Expected one of: {', '.join(sorted(OUTPUT_FORMATS))}"],
                },
            )

        if not file.filename.endswith(".json"):
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail={
                    "error": "File is not a JSON audit snapshot",
                    "code": ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                    "details": [f"Received: {file.filename}"],
                },
            )

        file_content = await file.read()
        request_log.file_size_bytes = len(file_content)

        if len(file_content) > config.MAX_UPLOAD_SIZE_BYTES:
            max_mb = config.MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={
                    "error": f"File exceeds maximum size of {max_mb} MB",
                    "code": ErrorCodes.FILE_TOO_LARGE,
                    "details": [f"File size: {len(file_content) / (1024*1024):.1f} MB"],
                },
            )

        report, event_count = await asyncio.to_thread(_build_report, file_content)

        request_log.status_code = 200
        request_log.events_received = event_count
        request_log.weeks_generated = len(report)
        request_log.total_hours = sum(b.hours for week in report for b in week.clients)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        if output_format == "csv":
            return Response(
                content=format_csv(report),
                media_type="text/csv",
                headers={"Content-Disposition": 'attachment; filename="calendar-hours.csv"'},
            )
        return HoursReportResponse.model_validate(report_document(report))

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

    except config.ConfigurationError as e:
        # Must come before ValueError: ConfigurationError subclasses it
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.CONFIGURATION_ERROR
        request_log.error_message = str(e)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Server configuration error",
                "code": ErrorCodes.CONFIGURATION_ERROR,
                "details": [str(e)],
            },
        )

    except ValueError as e:
        error_msg = str(e)
        request_log.status_code = 422
        request_log.error_code = ErrorCodes.VALIDATION_ERROR
        request_log.error_message = error_msg
        request_log.details.append(("validation_error", error_msg))
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Snapshot validation failed",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": [error_msg],
            },
        )

    except Exception as e:
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        try:
            log_request(request_log)
        except Exception:
            # Don't fail the request if logging fails
            pass
