"""Backup router for tenant export and restore."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status

from food_finance_api.config import get_settings
from food_finance_api.dependencies import AuthenticatedUser, get_backup_service
from food_finance_api.exceptions import RestoreErrorKind
from food_finance_api.models.dto.backup import (
    BackupSummary,
    BackupValidationResponse,
    RestoreResponse,
)
from food_finance_api.security.rate_limit import (
    BACKUP_EXPORT_LIMIT,
    BACKUP_IMPORT_LIMIT,
    BACKUP_INFO_LIMIT,
    limiter,
)
from food_finance_api.services.backup_service import BackupService, dump_bundle
from food_finance_api.utils.errors import raise_bad_request, raise_payload_too_large

logger = logging.getLogger(__name__)

router = APIRouter()

# Chunk size for streaming reads
READ_CHUNK_SIZE = 64 * 1024  # 64KB


async def read_upload_with_limit(file: UploadFile, max_size: int) -> bytes:
    """Read an uploaded file with size limit.

    Reads the file in chunks and stops early if the max size is exceeded.

    Args:
        file: The uploaded file
        max_size: Maximum allowed file size in bytes

    Returns:
        The file content as bytes

    Raises:
        HTTPException: If file exceeds max_size
    """
    chunks = []
    total_size = 0

    while True:
        chunk = await file.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > max_size:
            raise_payload_too_large(max_size // 1024 // 1024)
        chunks.append(chunk)

    return b"".join(chunks)


async def _read_backup_upload(file: UploadFile) -> bytes:
    content = await read_upload_with_limit(file, get_settings().backup_max_upload_bytes)
    if not content.strip():
        raise_bad_request("Backup file is empty")
    return content


@router.get("/summary", response_model=BackupSummary)
async def get_backup_summary(
    current_user: AuthenticatedUser,
    service: Annotated[BackupService, Depends(get_backup_service)],
) -> BackupSummary:
    """Record counts shown before exporting."""
    return await service.get_summary(current_user.tenant_id)


@router.post("/export")
@limiter.limit(BACKUP_EXPORT_LIMIT)
async def export_backup(
    request: Request,
    current_user: AuthenticatedUser,
    service: Annotated[BackupService, Depends(get_backup_service)],
) -> Response:
    """Export all of the caller's data as a JSON attachment."""
    bundle = await service.export_tenant(current_user.tenant_id)
    content = dump_bundle(bundle)

    timestamp = datetime.now(UTC).strftime("%Y-%m-%d")
    filename = f"food-finance-backup-{timestamp}.json"
    logger.info("Exported backup for tenant %s (%d bytes)", current_user.tenant_id, len(content))

    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/validate", response_model=BackupValidationResponse)
@limiter.limit(BACKUP_INFO_LIMIT)
async def validate_backup(
    request: Request,
    current_user: AuthenticatedUser,
    service: Annotated[BackupService, Depends(get_backup_service)],
    file: UploadFile = File(...),
) -> BackupValidationResponse:
    """Check a backup file and report what it contains, without importing."""
    content = await _read_backup_upload(file)
    return service.validate_backup(content)


@router.post("/import", response_model=RestoreResponse)
@limiter.limit(BACKUP_IMPORT_LIMIT)
async def import_backup(
    request: Request,
    response: Response,
    current_user: AuthenticatedUser,
    service: Annotated[BackupService, Depends(get_backup_service)],
    file: UploadFile = File(...),
) -> RestoreResponse:
    """Replace all of the caller's data with the contents of a backup file.

    Responds 400 when the file is rejected and 500 when the restore was
    rolled back; the body always describes the outcome.
    """
    content = await _read_backup_upload(file)
    result = await service.import_backup(current_user.tenant_id, content)

    if not result.success:
        response.status_code = (
            status.HTTP_500_INTERNAL_SERVER_ERROR
            if result.error_kind == RestoreErrorKind.TRANSACTION_FAILED
            else status.HTTP_400_BAD_REQUEST
        )
    return result
