"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

from app.config import AppSettings, get_app_settings

CSV_CONTENT_TYPES = {
    "text/csv",
    "text/plain",
    "application/csv",
    "application/vnd.ms-excel",
    "application/octet-stream",
}


def get_settings() -> AppSettings:
    return get_app_settings()


def get_optional_csv_upload(file: UploadFile | None = File(default=None)) -> UploadFile | None:
    """
    Validate that an uploaded file, when present, is a CSV by extension or MIME type.
    """

    if file is None:
        return None

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower().split(";")[0]

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file
