from __future__ import annotations

import copy
import json
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from cost_center_report.core.aggregate import build_parsed_data
from cost_center_report.core.errors import ParseError, ValidationError
from cost_center_report.core.schema import CostCenter, ParsedData, Resource

INVALID_STRUCTURE = (
    "Invalid JSON structure. Expected an object with costCenters (or data) property "
    "containing an array, or an array of cost centers."
)


def parse_document(raw: bytes | str) -> Any:
    """Decode and parse a JSON document, surfacing the parser's message on failure."""

    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"File is not valid UTF-8 text: {exc}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON: {exc}") from exc


def _extract_records(raw: Any) -> list[Any]:
    if isinstance(raw, dict):
        for key in ("costCenters", "data"):
            if isinstance(raw.get(key), list):
                return raw[key]
    elif isinstance(raw, list):
        return raw
    raise ValidationError(INVALID_STRUCTURE)


def _is_present(value: Any) -> bool:
    """Mirror JavaScript truthiness: empty objects and arrays count as present."""

    if isinstance(value, (dict, list)):
        return True
    if isinstance(value, float) and value != value:  # NaN
        return False
    return bool(value)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def _validate_resource(item: Any, index: int, resource_index: int) -> Resource:
    if not isinstance(item, dict) or not isinstance(item.get("type"), str) or not isinstance(item.get("name"), str):
        raise ValidationError(
            f"Invalid resource at index {resource_index} of cost center at index {index}. "
            "Expected type and name strings.",
            index=index,
            resource_index=resource_index,
        )
    return Resource(type=item["type"], name=item["name"])


def validate_record(record: Any, index: int) -> CostCenter:
    if (
        not isinstance(record, dict)
        or not _is_present(record.get("id"))
        or not _is_present(record.get("name"))
        or not _is_present(record.get("state"))
        or not isinstance(record.get("resources"), list)
    ):
        raise ValidationError(
            f"Invalid cost center at index {index}. Expected id, name, state, and resources array.",
            index=index,
        )

    resources = [
        _validate_resource(item, index, resource_index)
        for resource_index, item in enumerate(record["resources"])
    ]
    try:
        return CostCenter(
            id=_as_text(record["id"]),
            name=_as_text(record["name"]),
            state=_as_text(record["state"]),
            resources=tuple(resources),
            source_record=copy.deepcopy(record),
        )
    except PydanticValidationError as exc:  # pragma: no cover - inputs are pre-checked above
        raise ValidationError(f"Invalid cost center at index {index}: {exc}", index=index) from exc


def validate_document(raw: Any) -> list[CostCenter]:
    """Validate a parsed document and return its cost centers in input order.

    Validation stops at the first offending record.
    """

    records = _extract_records(raw)
    return [validate_record(record, index) for index, record in enumerate(records)]


def load_document(raw: bytes | str) -> ParsedData:
    return build_parsed_data(validate_document(parse_document(raw)))
