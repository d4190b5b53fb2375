"""Parsers for repeated CLI options."""

from pathlib import Path
from typing import Any, BinaryIO, List, Tuple

from ..exceptions import InvalidArgumentError


def parse_key_value(option: str, value: str) -> Tuple[str, str]:
    """Split ``key=value``."""
    key, sep, val = value.partition("=")
    if not sep or not key:
        raise InvalidArgumentError(option, f"expected key=value, got {value!r}")
    return key, val


def parse_header(value: str) -> Tuple[str, str]:
    """Split ``Name: value``."""
    name, sep, val = value.partition(":")
    name = name.strip()
    if not sep or not name:
        raise InvalidArgumentError("--header", f"expected 'Name: value', got {value!r}")
    return name, val.strip()


def parse_field(value: str, opened: List[BinaryIO]) -> Tuple[str, List[Any]]:
    """Parse a multipart field.

    ``name=@path`` uploads a file, ``name=@path;type=text/csv`` sets its
    content type and ``name=value`` sends a plain value. Files opened here
    are appended to ``opened``.
    """
    name, val = parse_key_value("--field", value)
    if not val.startswith("@"):
        return name, [val]

    location, _, params = val[1:].partition(";")
    content_type = None
    if params:
        key, sep, ct = params.partition("=")
        if key.strip() != "type" or not sep or not ct.strip():
            raise InvalidArgumentError("--field", f"expected ';type=<content type>', got {params!r}")
        content_type = ct.strip()

    path = Path(location).expanduser()
    try:
        handle = open(path, "rb")
    except OSError as e:
        raise InvalidArgumentError("--field", f"cannot open {path}: {e.strerror}") from e
    opened.append(handle)

    values: List[Any] = [handle]
    if content_type:
        values.append(content_type)
    return name, values
