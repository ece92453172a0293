from __future__ import annotations

import base64
import binascii
import os
import re
from dataclasses import dataclass, field
from typing import Union

DEFAULT_MIME_TYPE = "application/octet-stream"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w-]+=[\w.-]+)*;base64,(?P<data>.*)$", re.DOTALL)


class UploadSourceError(ValueError):
    pass


@dataclass(frozen=True)
class RemoteUrlSource:
    url: str

    @property
    def filename(self) -> str | None:
        return None

    def as_file(self) -> str:
        return self.url


@dataclass(frozen=True)
class Base64Source:
    data: str = field(repr=False)
    mime_type: str = DEFAULT_MIME_TYPE
    filename: str | None = None

    def as_file(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass(frozen=True)
class FileSource:
    content: bytes = field(repr=False)
    mime_type: str
    filename: str

    def as_file(self) -> bytes:
        return self.content


UploadSource = Union[RemoteUrlSource, Base64Source, FileSource]


def derive_public_id(filename: str | None) -> str | None:
    """Strip directory and extension: `photos/cat.v2.png` -> `cat.v2`."""
    if not filename:
        return None
    stem = os.path.splitext(os.path.basename(filename.strip()))[0].strip()
    return stem or None


def _clean(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


def _normalize_base64(file_data: str, file_type: str | None) -> tuple[str, str | None]:
    match = _DATA_URI_RE.match(file_data)
    if match:
        file_data = match.group("data")
        file_type = file_type or match.group("mime")

    payload = "".join(file_data.split())
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise UploadSourceError("fileData is not valid base64") from exc
    return payload, file_type


def build_upload_source(
    *,
    image_url: str | None = None,
    file_data: str | None = None,
    file_type: str | None = None,
    file_name: str | None = None,
) -> UploadSource:
    """
    Build the upload source from request fields.

    Exactly one of `image_url` / `file_data` must be present.
    """

    image_url = _clean(image_url)
    file_data = _clean(file_data)
    if image_url and file_data:
        raise UploadSourceError("Provide either imageUrl or fileData, not both")
    if image_url:
        return RemoteUrlSource(url=image_url)
    if file_data:
        payload, mime_type = _normalize_base64(file_data, _clean(file_type))
        return Base64Source(data=payload, mime_type=mime_type or DEFAULT_MIME_TYPE, filename=_clean(file_name))
    raise UploadSourceError("An image URL, base64 file data or a file upload is required")


def build_file_source(content: bytes, *, filename: str | None, content_type: str | None) -> FileSource:
    if not content:
        raise UploadSourceError("Uploaded file is empty")
    return FileSource(
        content=content,
        mime_type=_clean(content_type) or DEFAULT_MIME_TYPE,
        filename=_clean(filename) or "upload",
    )
