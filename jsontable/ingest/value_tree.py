"""
Generic JSON value tree helpers.

The JSON parser produces plain Python values (dict, list, str, int, float,
bool, None). Every flattening and typing rule switches on the `JsonKind`
tag returned by `detect_json_kind` rather than on ad-hoc isinstance checks.
"""

from enum import Enum
from typing import Any, List

from jsontable.ingest.errors import MalformedInputError


class JsonKind(str, Enum):
    """Enumeration of JSON value kinds."""
    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def detect_json_kind(value: Any) -> JsonKind:
    """
    Detect the JSON kind of a parsed value.

    Args:
        value: The value to check

    Returns:
        JsonKind enum value

    Raises:
        MalformedInputError: If the value is not something a JSON parser produces
    """
    if value is None:
        return JsonKind.NULL
    elif isinstance(value, bool):
        return JsonKind.BOOLEAN
    elif isinstance(value, int):
        return JsonKind.INTEGER
    elif isinstance(value, float):
        return JsonKind.FLOAT
    elif isinstance(value, str):
        return JsonKind.STRING
    elif isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    elif isinstance(value, dict):
        return JsonKind.OBJECT
    raise MalformedInputError(f"Unsupported JSON value of type {type(value).__name__}")


def is_container(kind: JsonKind) -> bool:
    return kind in (JsonKind.ARRAY, JsonKind.OBJECT)


def _unescape_token(token: str) -> str:
    # RFC 6901: "~1" before "~0" so that "~01" decodes to "~1"
    return token.replace("~1", "/").replace("~0", "~")


def split_pointer(pointer: str) -> List[str]:
    """
    Split a JSON Pointer into reference tokens.

    Args:
        pointer: Pointer such as "/data/items" ("" selects the whole document)

    Returns:
        List of unescaped tokens
    """
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise MalformedInputError(f"JSON Pointer must start with '/': {pointer!r}")
    return [_unescape_token(token) for token in pointer[1:].split("/")]


def select_pointer(document: Any, pointer: str) -> Any:
    """
    Select the sub-tree addressed by a JSON Pointer.

    Args:
        document: Parsed JSON document
        pointer: RFC 6901 pointer

    Returns:
        The selected value

    Raises:
        MalformedInputError: If any token does not resolve
    """
    current = document
    for token in split_pointer(pointer):
        kind = detect_json_kind(current)
        if kind == JsonKind.OBJECT:
            if token not in current:
                raise MalformedInputError(
                    f"JSON Pointer {pointer!r} does not resolve: missing key {token!r}")
            current = current[token]
        elif kind == JsonKind.ARRAY:
            if not token.isdigit() or (len(token) > 1 and token[0] == "0"):
                raise MalformedInputError(
                    f"JSON Pointer {pointer!r} does not resolve: {token!r} is not an array index")
            index = int(token)
            if index >= len(current):
                raise MalformedInputError(
                    f"JSON Pointer {pointer!r} does not resolve: index {index} out of range")
            current = current[index]
        else:
            raise MalformedInputError(
                f"JSON Pointer {pointer!r} does not resolve: cannot descend into {kind.value}")
    return current


def as_record_list(document: Any) -> List[Any]:
    """
    Turn the (selected) outer document into the list of records.

    An array is the record list; a single object is one record.
    """
    kind = detect_json_kind(document)
    if kind == JsonKind.ARRAY:
        return list(document)
    if kind == JsonKind.OBJECT:
        return [document]
    raise MalformedInputError(
        f"Expected a JSON array or object of records, got {kind.value}")
