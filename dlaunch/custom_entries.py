from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, ValidationError

from .models import CustomEntry, Port
from .settings import ConfigError


# A JSON string literal, or a comma directly before a closing bracket/brace.
_TRAILING_COMMA_RE = re.compile(r'("(?:\\.|[^"\\])*")|,(\s*[\]}])')


def _field_keys(model: type[BaseModel]) -> dict[str, str]:
    """lower-case key -> field name, for both snake_case and camelCase spellings."""
    keys: dict[str, str] = {}
    for name, info in model.model_fields.items():
        keys[name.lower()] = name
        keys[name.replace("_", "").lower()] = name
        if info.alias:
            keys[info.alias.lower()] = name
    return keys


_KEYS = _field_keys(CustomEntry)
_PORT_KEYS = _field_keys(Port)


def _strip_trailing_commas(raw: str) -> str:
    return _TRAILING_COMMA_RE.sub(lambda m: m.group(1) or m.group(2), raw)


def _normalize_keys(record: dict[str, Any], keys: dict[str, str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in record.items():
        name = keys.get(str(k).lower())
        if name is not None:
            out[name] = v
    return out


def _normalize_entry(record: dict[str, Any]) -> dict[str, Any]:
    out = _normalize_keys(record, _KEYS)
    if isinstance(out.get("ports"), list):
        out["ports"] = [_normalize_keys(p, _PORT_KEYS) if isinstance(p, dict) else p for p in out["ports"]]
    return out


def parse_custom_entries(raw: str | None) -> list[CustomEntry]:
    """Parse the inline custom entry declaration (``DL_EXTRA``).

    Example::

        [{"name": "nas", "navigateUrl": "https://nas.*", "iconUrl": "/nas.png"},]
    """
    if raw is None or not raw.strip():
        return []

    try:
        data = json.loads(_strip_trailing_commas(raw.strip()))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid custom entries JSON: {e}") from e

    if not isinstance(data, list):
        raise ConfigError("Custom entries must be a JSON array of objects.")

    entries: list[CustomEntry] = []
    for i, record in enumerate(data):
        if not isinstance(record, dict):
            raise ConfigError(f"Custom entry #{i} must be an object.")
        try:
            entries.append(CustomEntry.model_validate(_normalize_entry(record)))
        except ValidationError as e:
            raise ConfigError(f"Invalid custom entry #{i}: {e}") from e
    return entries
