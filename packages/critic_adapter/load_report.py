# Adapter boundary: parse Perl::Critic JSON and normalize it to our schema.
import json
from typing import Any, Optional, Tuple, Union

from pydantic import ValidationError

from packages.schema.errors import ParseError, SchemaError
from packages.schema.models import ViolationReport


def load(data: Union[bytes, str]) -> ViolationReport:
    """
    Parse and validate a report document.

    Raises ParseError for malformed JSON and SchemaError for anything that
    parses but does not match the report schema. Nothing partial is returned.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Input is not valid UTF-8: {exc}") from exc

    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Malformed JSON at line {exc.lineno} column {exc.colno}: {exc.msg}") from exc

    # \ud800-style escapes decode to lone surrogates that cannot be written back as UTF-8.
    try:
        json.dumps(payload, ensure_ascii=False).encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ParseError(f"Input contains an unpaired surrogate escape: {exc.reason}") from exc

    if not isinstance(payload, dict):
        raise SchemaError(f"top-level value must be an object, got {_json_type(payload)}")

    try:
        return ViolationReport.model_validate(payload)
    except ValidationError as exc:
        raise _schema_error(exc) from exc


def _schema_error(exc: ValidationError) -> SchemaError:
    # Report the first problem only; the load fails as a whole either way.
    first = exc.errors()[0]
    field, index = _split_loc(first["loc"])
    if first["type"] == "missing":
        message = "required field is missing"
    else:
        message = f"{first['msg']} (got {_json_type(first.get('input'))})"
    return SchemaError(message, field=field, index=index)


def _split_loc(loc: Tuple[Union[int, str], ...]) -> Tuple[Optional[str], Optional[int]]:
    if len(loc) >= 2 and loc[0] == "violations" and isinstance(loc[1], int):
        rest = ".".join(str(part) for part in loc[2:])
        return (rest or None), loc[1]
    return (".".join(str(part) for part in loc) or None), None


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


__all__ = ["load"]
