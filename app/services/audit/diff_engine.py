"""
Field-level change sets for the audit trail.

Every mutating endpoint takes a JSON-safe snapshot of the row before and after
the write and stores only the fields whose values differ. Snapshots are
independent copies, so values are compared structurally, never by identity.
"""
from typing import Any, Dict, Iterable, Mapping, Optional
from fastapi.encoders import jsonable_encoder
from sqlalchemy import inspect

OLD_VALUE = "oldValue"
NEW_VALUE = "newValue"

ChangeSet = Dict[str, Dict[str, Any]]


def snapshot_model(instance: Any, exclude: Iterable[str] = ()) -> Dict[str, Any]:
    """Materialize the column attributes of an ORM row as a JSON-safe dict"""
    excluded = set(exclude)
    mapper = inspect(instance).mapper
    data = {
        attr.key: getattr(instance, attr.key)
        for attr in mapper.column_attrs
        if attr.key not in excluded
    }
    return jsonable_encoder(data)


def values_equal(left: Any, right: Any) -> bool:
    """
    Deep, type-aware equality for JSON-like values.

    Dict key order is ignored, list order is significant, and booleans never
    compare equal to numbers (True != 1) even though Python's == says they do.
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if set(left.keys()) != set(right.keys()):
            return False
        return all(values_equal(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, (Mapping, list, tuple)) or isinstance(right, (Mapping, list, tuple)):
        return False

    return left == right


def diff_snapshots(
    before: Optional[Mapping[str, Any]],
    after: Optional[Mapping[str, Any]],
    fields: Optional[Iterable[str]] = None,
) -> ChangeSet:
    """
    Compare two snapshots and return {field: {"oldValue", "newValue"}} for changed fields.

    ``before=None`` describes a create and ``after=None`` a delete; absent
    fields read as None. When ``fields`` is omitted every key present in either
    snapshot is compared.
    """
    before = before or {}
    after = after or {}

    if fields is None:
        field_names = list(before.keys()) + [key for key in after.keys() if key not in before]
    else:
        field_names = list(dict.fromkeys(fields))

    changes: ChangeSet = {}
    for field in field_names:
        old_value = before.get(field)
        new_value = after.get(field)
        if not values_equal(old_value, new_value):
            changes[field] = {OLD_VALUE: old_value, NEW_VALUE: new_value}
    return changes
