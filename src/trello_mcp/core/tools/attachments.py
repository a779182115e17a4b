from __future__ import annotations

import asyncio
import base64
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from urllib.parse import unquote, urlsplit

from trello_mcp.core.client import AttachmentData, TrelloClient
from trello_mcp.core.envelope import ToolResult, blob_block, image_block, text_block
from trello_mcp.core.errors import AttachmentError
from trello_mcp.core.models import DownloadToPathInput, FetchByUrlInput
from trello_mcp.core.registry import ToolSpec

DEFAULT_IMAGE_MIME = "image/jpeg"
DEFAULT_BINARY_MIME = "application/octet-stream"
FALLBACK_FILE_NAME = "attachment"
TMP_DIR_PREFIX = "trello-mcp-"

MIME_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "bmp": "image/bmp",
    "tiff": "image/tiff",
    "ico": "image/x-icon",
    "heic": "image/heic",
    "pdf": "application/pdf",
    "txt": "text/plain",
    "csv": "text/csv",
    "json": "application/json",
    "md": "text/markdown",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "zip": "application/zip",
    "rar": "application/vnd.rar",
    "7z": "application/x-7z-compressed",
    "tar": "application/x-tar",
    "gz": "application/gzip",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
}


def file_name_from_url(url: str) -> Optional[str]:
    """Percent-decoded last path segment of url, if any."""
    segments = [s for s in urlsplit(url).path.split("/") if s]
    if not segments:
        return None
    return _safe_name(unquote(segments[-1]))


def mime_type_for(name_or_url: str, default: str = DEFAULT_BINARY_MIME) -> str:
    """Look up a MIME type by file extension; default when unknown."""
    name = name_or_url
    if "://" in name_or_url:
        name = file_name_from_url(name_or_url) or ""
    if "." not in name:
        return default
    extension = name.rsplit(".", 1)[1].lower()
    return MIME_TYPES.get(extension, default)


def _safe_name(name: Optional[str]) -> Optional[str]:
    """Reduce a candidate file name to its final path component."""
    if not name:
        return None
    base = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if base in ("", ".", ".."):
        return None
    return base


def infer_file_name(
    provided: Optional[str], detected: Optional[str], url: str
) -> str:
    """provided -> response metadata -> URL path -> "attachment"."""
    return (
        _safe_name(provided)
        or _safe_name(detected)
        or file_name_from_url(url)
        or FALLBACK_FILE_NAME
    )


def resolve_destination(dest_path: str, file_name: str) -> Path:
    """
    A destPath ending in a separator, or naming an existing directory, is a
    directory to place file_name in; anything else is the literal file path.
    """
    raw = os.path.expanduser(dest_path)
    separators = tuple(s for s in (os.sep, os.altsep) if s)
    if raw.endswith(separators) or Path(raw).is_dir():
        return Path(raw) / file_name
    return Path(raw)


def _write_bytes(target: Path, data: bytes, overwrite: bool) -> Path:
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        # "xb" makes the existence check and the create one step
        with open(target, "wb" if overwrite else "xb") as fh:
            fh.write(data)
    except FileExistsError as exc:
        raise AttachmentError(f"File exists: {target}", cause=exc) from exc
    return target.resolve()


def _write_to_path(
    dest_path: str, file_name: str, data: bytes, overwrite: bool
) -> Path:
    return _write_bytes(resolve_destination(dest_path, file_name), data, overwrite)


def _write_to_tmp(file_name: str, data: bytes) -> Path:
    directory = tempfile.mkdtemp(prefix=TMP_DIR_PREFIX)
    return _write_bytes(Path(directory) / file_name, data, False)


async def _save(write: Callable[..., Path], *args: Any) -> Path:
    """Run a blocking write (path resolution included) in a worker thread."""
    try:
        return await asyncio.to_thread(write, *args)
    except OSError as exc:
        raise AttachmentError(f"Failed to write attachment: {exc}", cause=exc) from exc


def _download_result(path: Path, attachment: AttachmentData) -> ToolResult:
    mime_type = attachment.mime_type or mime_type_for(path.name)
    structured: Dict[str, Any] = {
        "type": "attachment_download",
        "path": str(path),
        "fileName": path.name,
        "size": len(attachment.data),
        "mimeType": mime_type,
    }
    return ToolResult(
        content=[
            text_block(
                f"Saved attachment to {path} ({len(attachment.data)} bytes, {mime_type})"
            )
        ],
        structured_content=structured,
    )


async def fetch_image_by_url(client: TrelloClient, args: FetchByUrlInput) -> ToolResult:
    """Return the image inline as base64; MIME type comes from the URL extension."""
    attachment = await client.fetch_attachment(args.url, tool="fetch_image_by_url")
    return ToolResult(
        content=[
            image_block(
                base64.b64encode(attachment.data).decode("ascii"),
                mime_type_for(args.url, DEFAULT_IMAGE_MIME),
            )
        ]
    )


async def fetch_attachment_by_url(
    client: TrelloClient, args: FetchByUrlInput
) -> ToolResult:
    """Return any attachment inline as an embedded base64 blob resource."""
    attachment = await client.fetch_attachment(args.url, tool="fetch_attachment_by_url")
    name = infer_file_name(args.file_name, attachment.file_name, args.url)
    mime_type = attachment.mime_type or mime_type_for(name)
    return ToolResult(
        content=[
            text_block(f"{name} ({len(attachment.data)} bytes, {mime_type})"),
            blob_block(
                args.url, base64.b64encode(attachment.data).decode("ascii"), mime_type
            ),
        ]
    )


async def download_attachment_to_tmp(
    client: TrelloClient, args: FetchByUrlInput
) -> ToolResult:
    """Save an attachment into a fresh temporary directory."""
    attachment = await client.fetch_attachment(
        args.url, tool="download_attachment_to_tmp"
    )
    name = infer_file_name(args.file_name, attachment.file_name, args.url)
    path = await _save(_write_to_tmp, name, attachment.data)
    return _download_result(path, attachment)


async def download_attachment_to_path(
    client: TrelloClient, args: DownloadToPathInput
) -> ToolResult:
    """
    Save an attachment to destPath (file path or directory).
    Parent directories are created; an existing file is only replaced when
    overwrite is set.
    """
    attachment = await client.fetch_attachment(
        args.url, tool="download_attachment_to_path"
    )
    name = infer_file_name(args.file_name, attachment.file_name, args.url)
    path = await _save(
        _write_to_path, args.dest_path, name, attachment.data, args.overwrite
    )
    return _download_result(path, attachment)


TOOLS = (
    ToolSpec(
        name="fetch_image_by_url",
        description=(
            "Fetch a single image from a Trello attachment URL and return it as "
            "inline image content"
        ),
        input_model=FetchByUrlInput,
        handler=fetch_image_by_url,
    ),
    ToolSpec(
        name="fetch_attachment_by_url",
        description=(
            "Fetch any Trello attachment URL and return its bytes as an embedded "
            "base64 resource"
        ),
        input_model=FetchByUrlInput,
        handler=fetch_attachment_by_url,
    ),
    ToolSpec(
        name="download_attachment_to_tmp",
        description=(
            "Download a Trello attachment to a temporary system directory and "
            "return its path and mime type"
        ),
        input_model=FetchByUrlInput,
        handler=download_attachment_to_tmp,
    ),
    ToolSpec(
        name="download_attachment_to_path",
        description=(
            "Download a Trello attachment to a local file or directory and return "
            "its path, size and mime type"
        ),
        input_model=DownloadToPathInput,
        handler=download_attachment_to_path,
    ),
)
