"""Recursive structural diff of parsed JSON documents.

Objects are compared key by key and produce one record per differing leaf,
addressed by a dotted key path. Arrays are compared as whole values and
ignore element order: two arrays are equal when they hold the same elements
as a multiset, compared through their canonical JSON encoding. A change of
JSON type is always reported as ``modified``.
"""

from __future__ import annotations

import json
from typing import Any, List

from ..models import Category, KeyAdded, KeyModified, KeyRemoved

_MISSING = object()


def json_type(value: Any) -> str:
    """JSON type name of a parsed value; booleans are never numbers."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def _normalize(value: Any) -> Any:
    """Integral floats become ints so ``1.0`` encodes like ``1`` at any depth."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    if isinstance(value, dict):
        return {k: _normalize(v) for k, v in value.items()}
    return value


def _canonical(value: Any) -> str:
    return json.dumps(_normalize(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def arrays_equal(old: list, new: list) -> bool:
    """Order-insensitive equality of two JSON arrays."""
    if len(old) != len(new):
        return False
    return sorted(_canonical(v) for v in old) == sorted(_canonical(v) for v in new)


def values_equal(old: Any, new: Any) -> bool:
    old_type = json_type(old)
    if old_type != json_type(new):
        return False
    if old_type == "array":
        return arrays_equal(old, new)
    if old_type == "object":
        return _canonical(old) == _canonical(new)
    return old == new


class StructuralDiffer:
    """Produces ``added``/``removed``/``modified`` records for one file pair."""

    def __init__(self, category: Category, file_name: str):
        self.category = category
        self.file_name = file_name

    def diff(self, old_value: Any, new_value: Any, path_prefix: str = "") -> List:
        """Compare two parsed documents rooted at ``path_prefix``."""
        changes: List = []
        if isinstance(old_value, dict) and isinstance(new_value, dict):
            self._diff_objects(old_value, new_value, path_prefix, changes)
        elif not values_equal(old_value, new_value):
            changes.append(self._modified(path_prefix, old_value, new_value))
        return changes

    def _diff_objects(self, old_obj: dict, new_obj: dict, prefix: str, changes: List) -> None:
        keys = list(old_obj)
        keys.extend(k for k in new_obj if k not in old_obj)

        for key in keys:
            full_path = f"{prefix}.{key}" if prefix else key
            old_val = old_obj.get(key, _MISSING)
            new_val = new_obj.get(key, _MISSING)

            if old_val is _MISSING:
                changes.append(KeyAdded(
                    category=self.category, file_name=self.file_name, path=full_path, value=new_val,
                ))
            elif new_val is _MISSING:
                changes.append(KeyRemoved(
                    category=self.category, file_name=self.file_name, path=full_path, value=old_val,
                ))
            elif json_type(old_val) != json_type(new_val):
                changes.append(self._modified(full_path, old_val, new_val))
            elif isinstance(old_val, dict):
                self._diff_objects(old_val, new_val, full_path, changes)
            elif isinstance(old_val, list):
                if not arrays_equal(old_val, new_val):
                    changes.append(self._modified(full_path, old_val, new_val))
            elif old_val != new_val:
                changes.append(self._modified(full_path, old_val, new_val))

    def _modified(self, path: str, old_val: Any, new_val: Any) -> KeyModified:
        return KeyModified(
            category=self.category,
            file_name=self.file_name,
            path=path,
            old_value=old_val,
            new_value=new_val,
        )


def diff_documents(old_value: Any, new_value: Any, path_prefix: str = "",
                   category: Category = Category.METADATA, file_name: str = "") -> List:
    """Functional shortcut for ``StructuralDiffer(category, file_name).diff(...)``."""
    return StructuralDiffer(category, file_name).diff(old_value, new_value, path_prefix)
