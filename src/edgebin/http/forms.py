"""Form data parsing: URL-encoded and multipart.

URL-encoded forms use stdlib ``urllib.parse``; multipart bodies go
through ``python-multipart``'s callback parser.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl

from python_multipart.multipart import MultipartParser, parse_options_header


@dataclass(frozen=True, slots=True)
class UploadFile:
    """An uploaded file from a multipart form submission.

    The file content is held in memory as bytes.
    """

    filename: str
    content_type: str
    size: int
    _content: bytes

    @property
    def content(self) -> bytes:
        return self._content

    def __repr__(self) -> str:
        return f"UploadFile({self.filename!r}, {self.content_type!r}, {self.size} bytes)"


class FormData(Mapping[str, str]):
    """Immutable parsed form data.

    A ``Mapping[str, str]`` of the first value per field. Holds both string field values and uploaded files, each in the order
    the client sent them.

    Usage::

        form = await request.form()
        username = form["username"]
        uploads = form.file_pairs()  # [(field, UploadFile), ...]
    """

    __slots__ = ("_data", "_file_pairs", "_pairs")

    def __init__(
        self,
        pairs: list[tuple[str, str]] | None = None,
        files: list[tuple[str, UploadFile]] | None = None,
    ) -> None:
        pairs = pairs or []
        data: dict[str, list[str]] = {}
        for key, value in pairs:
            data.setdefault(key, []).append(value)
        object.__setattr__(self, "_pairs", tuple(pairs))
        object.__setattr__(self, "_data", data)
        object.__setattr__(self, "_file_pairs", tuple(files or ()))

    def file_pairs(self) -> list[tuple[str, UploadFile]]:
        """All ``(field, UploadFile)`` pairs in the order they were sent."""
        return list(self._file_pairs)

    def pairs(self) -> list[tuple[str, str]]:
        """All plain ``(field, value)`` pairs in the order they were sent."""
        return list(self._pairs)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"FormData({{{items}}})"


async def parse_form_data(
    body: bytes,
    content_type: str,
) -> FormData:
    """Parse form body into FormData.

    Supports ``application/x-www-form-urlencoded`` and
    ``multipart/form-data``.

    Raises:
        ValueError: If content type is not a supported form encoding,
            or a multipart body has no boundary.
    """
    ct_lower = content_type.lower().split(";")[0].strip()

    if ct_lower == "application/x-www-form-urlencoded":
        return _parse_urlencoded(body)

    if ct_lower == "multipart/form-data":
        return _parse_multipart(body, content_type)

    msg = f"Unsupported form content type: {content_type!r}"
    raise ValueError(msg)


def _parse_urlencoded(body: bytes) -> FormData:
    return FormData(parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True))


def _parse_multipart(body: bytes, content_type: str) -> FormData:
    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if boundary is None:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    fields: list[tuple[str, str]] = []
    files: list[tuple[str, UploadFile]] = []

    # Current part state
    current_headers: dict[str, str] = {}
    header_field = bytearray()
    header_value = bytearray()
    current_data = bytearray()

    def on_part_begin() -> None:
        current_headers.clear()
        current_data.clear()

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        current_data.extend(chunk[start:end])

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_field.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        name = header_field.decode("latin-1").lower()
        current_headers[name] = header_value.decode("latin-1")
        header_field.clear()
        header_value.clear()

    def on_part_end() -> None:
        disposition = current_headers.get("content-disposition")
        if disposition is None:
            return
        _, params = parse_options_header(disposition.encode("latin-1"))
        name = params.get(b"name")
        if name is None:
            return
        field_name = name.decode("utf-8")
        filename = params.get(b"filename")
        if filename is not None:
            content = bytes(current_data)
            files.append(
                (
                    field_name,
                    UploadFile(
                        filename=filename.decode("utf-8"),
                        content_type=current_headers.get(
                            "content-type", "application/octet-stream"
                        ),
                        size=len(content),
                        _content=content,
                    ),
                )
            )
        else:
            fields.append((field_name, current_data.decode("utf-8", errors="replace")))

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return FormData(fields, files)
