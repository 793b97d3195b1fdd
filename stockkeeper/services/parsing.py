import math

from stockkeeper.exceptions import ValidationError

_PLACEHOLDER_VALUES = {"none", "[none]", "null", "[null]", "na", "n/a", "nan", "-", "--"}


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def clean_text(value):
    if is_blank(value):
        return None
    text = str(value).strip()
    if not text:
        return None
    if text.lower() in _PLACEHOLDER_VALUES:
        return None
    return text


def _describe(value):
    return value if isinstance(value, (int, float, str)) else repr(value)


def to_int(value, field):
    error = ValidationError(f"{field} must be an integer", details={field: _describe(value)})
    if is_blank(value) or isinstance(value, bool):
        raise error
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise error
    if isinstance(value, str):
        value_text = value.strip()
        try:
            return int(value_text)
        except ValueError:
            try:
                numeric = float(value_text)
            except ValueError:
                raise error from None
            if not numeric.is_integer():
                raise error
            return int(numeric)
    raise error


def to_non_negative_int(value, field):
    number = to_int(value, field)
    if number < 0:
        raise ValidationError(f"{field} must be non-negative", details={field: number})
    return number


def to_non_negative_float(value, field):
    if is_blank(value) or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", details={field: _describe(value)})
    if isinstance(value, str):
        value = value.replace(",", "")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", details={field: _describe(value)}) from None
    if not math.isfinite(number) or number < 0:
        raise ValidationError(f"{field} must be non-negative", details={field: _describe(value)})
    return number


__all__ = [
    "clean_text",
    "is_blank",
    "to_int",
    "to_non_negative_float",
    "to_non_negative_int",
]
