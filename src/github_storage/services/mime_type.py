"""MIME type detection from file names.

Only the extension is looked at; content is never sniffed.  Anything not in
the table is reported as ``text/plain``.
"""

from __future__ import annotations

import posixpath

DEFAULT_MIMETYPE = "text/plain"

EXTENSION_MIMETYPES: dict[str, str] = {
    # Text & markup
    "txt": "text/plain",
    "text": "text/plain",
    "log": "text/plain",
    "csv": "text/csv",
    "htm": "text/html",
    "html": "text/html",
    "css": "text/css",
    "xml": "application/xml",
    "xsl": "application/xml",
    "rtf": "text/rtf",
    "ics": "text/calendar",
    # Code & data
    "js": "application/javascript",
    "mjs": "application/javascript",
    "json": "application/json",
    "yaml": "application/x-yaml",
    "yml": "application/x-yaml",
    "php": "application/x-httpd-php",
    "py": "text/x-python",
    "sh": "application/x-sh",
    "sql": "application/sql",
    # Images
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "jpe": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "ico": "image/x-icon",
    "svg": "image/svg+xml",
    "svgz": "image/svg+xml",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "webp": "image/webp",
    # Audio & video
    "mp3": "audio/mpeg",
    "wav": "audio/x-wav",
    "ogg": "audio/ogg",
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    "webm": "video/webm",
    # Documents
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "odt": "application/vnd.oasis.opendocument.text",
    "epub": "application/epub+zip",
    # Archives
    "zip": "application/zip",
    "gz": "application/x-gzip",
    "tgz": "application/x-tar",
    "tar": "application/x-tar",
    "bz2": "application/x-bzip2",
    "7z": "application/x-7z-compressed",
    "rar": "application/x-rar",
    # Fonts
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
}


def detect_by_filename(path: str) -> str:
    """Return the MIME type for *path* based on its extension."""
    _, ext = posixpath.splitext(posixpath.basename(path))
    return EXTENSION_MIMETYPES.get(ext[1:].lower(), DEFAULT_MIMETYPE)
