from typing import Any


def safe_int(value: Any) -> int | None:
    """
    Parse an integer from ESPN score-like values.

    Accepts ints, numeric strings ("24", "24.0"), floats and
    {"value": 24.0, "displayValue": "24"} objects. Returns None when the
    value cannot be parsed so "not played" stays distinct from zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, dict):
        for key in ("value", "displayValue"):
            parsed = safe_int(value.get(key))
            if parsed is not None:
                return parsed
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
            return int(number) if number.is_integer() else None
    return None
