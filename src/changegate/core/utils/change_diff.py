from typing import Any

from changegate.core.models.change import ChangeDetails

_MISSING = object()


def _value_kind(value: Any) -> type:
    # JSON has one number type; bool is not a number
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float
    return type(value)


def is_change_details_changed(
    prev_details: ChangeDetails, curr_details: ChangeDetails
) -> bool:
    """
    Return True when the current change snapshot differs from the previous one.
    - Different number of fields counts as a change.
    - Otherwise every field of the current snapshot is compared strictly with
      the previous value: a missing previous field differs from a stored None,
      and values of different JSON types differ even when Python calls them
      equal (`1` vs `True`).

    Only used to decide whether a snapshot is worth printing again.
    """
    if len(curr_details) != len(prev_details):
        return True
    for field, value in curr_details.items():
        prev = prev_details.get(field, _MISSING)
        if prev is _MISSING or _value_kind(prev) is not _value_kind(value):
            return True
        if prev != value:
            return True
    return False
