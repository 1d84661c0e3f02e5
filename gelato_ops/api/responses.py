"""File download responses."""
from __future__ import annotations

from fastapi import Response

from gelato_ops.services.documents import RenderMode

PDF_MEDIA_TYPE = "application/pdf"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def file_response(content: bytes, *, filename: str, media_type: str, inline: bool = False) -> Response:
    disposition = "inline" if inline else "attachment"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'{disposition}; filename="{filename}"'},
    )


def pdf_response(content: bytes, *, filename: str, mode: RenderMode) -> Response:
    """Print mode opens in the browser viewer; download mode saves the file."""

    return file_response(
        content, filename=filename, media_type=PDF_MEDIA_TYPE, inline=mode is RenderMode.PRINT
    )


__all__ = ["PDF_MEDIA_TYPE", "XLSX_MEDIA_TYPE", "file_response", "pdf_response"]
