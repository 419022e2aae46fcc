"""Turn snapshots into HTTP requests.

A RequestShape names the method, path, body encoding and which snapshot
attributes map to which form fields. Only set attributes are emitted.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple, Union
from urllib.parse import quote, urlencode

import httpx

from .config import DEFAULT_BASE_URL
from .errors import EncodingError
from .fluent import Snapshot
from .media import FileField

# Shared by every multipart request of the process
BOUNDARY = "---------------------------123456789012345678901234567"

PLACEHOLDER = re.compile(r"\{(\w+)\}")


class Encoding(Enum):
    URLENCODED = "application/x-www-form-urlencoded"
    MULTIPART = "multipart/form-data"
    EMPTY = "empty"


@dataclass(frozen=True)
class FieldMap:
    attribute: str
    form_name: str


def form_fields(*specs: Union[str, Tuple[str, str]]) -> Tuple[FieldMap, ...]:
    """`"title"` maps to itself, `("main", "is_main")` renames."""
    mapped = []
    for spec in specs:
        if isinstance(spec, str):
            mapped.append(FieldMap(spec, spec))
        else:
            mapped.append(FieldMap(*spec))
    return tuple(mapped)


@dataclass(frozen=True)
class RequestShape:
    method: str
    path: str
    encoding: Encoding = Encoding.URLENCODED
    fields: Tuple[FieldMap, ...] = ()
    required_files: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AssembledRequest:
    """A request ready for one dispatch."""

    method: str
    path: str
    headers: Tuple[Tuple[str, str], ...] = ()
    body: bytes = b""

    def header(self, name: str) -> Optional[str]:
        for key, value in self.headers:
            if key.lower() == name.lower():
                return value
        return None

    def with_header(self, name: str, value: str) -> "AssembledRequest":
        """Copy with `name` set to `value`, replacing any previous value."""
        headers = tuple((k, v) for k, v in self.headers if k.lower() != name.lower())
        return AssembledRequest(self.method, self.path, headers + ((name, value),), self.body)


def form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def fill_path(template: str, snapshot: Snapshot) -> str:
    def replace(match: re.Match) -> str:
        name = match.group(1)
        value = getattr(snapshot, name, None)
        if value is None:
            raise EncodingError(f"Path {template!r} needs '{name}', which is not set")
        return quote(form_value(value), safe="")

    return PLACEHOLDER.sub(replace, template)


def assemble(snapshot: Snapshot, shape: RequestShape) -> AssembledRequest:
    """Build the request for `shape` from the set fields of `snapshot`."""
    path = fill_path(shape.path, snapshot)
    present = snapshot.present()

    for name in shape.required_files:
        if not isinstance(present.get(name), FileField):
            raise EncodingError(f"Required file field '{name}' is not set")

    if shape.encoding is Encoding.EMPTY:
        return AssembledRequest(shape.method, path)

    pairs = [
        (mapping.form_name, present[mapping.attribute])
        for mapping in shape.fields
        if mapping.attribute in present
    ]

    if shape.encoding is Encoding.URLENCODED:
        body = _urlencoded(pairs)
        content_type = Encoding.URLENCODED.value
    else:
        content_type = f"{Encoding.MULTIPART.value}; boundary={BOUNDARY}"
        body = _multipart(shape.method, pairs, content_type)

    return AssembledRequest(shape.method, path, (("Content-Type", content_type),), body)


def _urlencoded(pairs: List[Tuple[str, Any]]) -> bytes:
    encoded = []
    for name, value in pairs:
        if isinstance(value, FileField):
            raise EncodingError(f"File field '{name}' cannot be URL-encoded")
        encoded.append((name, form_value(value)))
    return urlencode(encoded).encode("ascii")


def _multipart(method: str, pairs: List[Tuple[str, Any]], content_type: str) -> bytes:
    # Text values go through `files` with no filename so httpx keeps shape
    # order and never falls back to URL encoding.
    if not pairs:
        raise EncodingError("Multipart body needs at least one set field")

    delimiter = f"--{BOUNDARY}".encode("ascii")
    parts = []
    for name, value in pairs:
        if isinstance(value, FileField):
            if delimiter in value.content:
                raise EncodingError(f"File field '{name}' contains the multipart boundary")
            parts.append((name, (value.filename, value.content, value.content_type)))
        else:
            text = form_value(value)
            if BOUNDARY in text:
                raise EncodingError(f"Field '{name}' contains the multipart boundary")
            parts.append((name, (None, text)))

    request = httpx.Request(method, DEFAULT_BASE_URL, files=parts, headers={"Content-Type": content_type})
    return request.read()
