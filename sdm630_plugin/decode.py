"""
Register decoding and plausibility checks.
"""
import math

from pyModbusTCP.utils import decode_ieee, get_2comp, word_list_to_long

from .properties import ValueType


def decode_value(words, value_type):
    """
    Turn the raw 16-bit words of one property into a number.
    Multi-word values are big-endian (high word first), as the SDM630 sends them.
    """
    if len(words) < value_type.words:
        raise ValueError(f"{value_type.label} needs {value_type.words} registers, got {len(words)}")

    if value_type.words == 1:
        value = words[0] & 0xFFFF
        return get_2comp(value, 16) if value_type.signed else value

    value = word_list_to_long(list(words[:2]))[0]
    if value_type is ValueType.FLOAT:
        return decode_ieee(value)
    return get_2comp(value, 32) if value_type.signed else value


def is_value_reasonable(value, prop):
    """
    Check a decoded value (factor already applied) against the property bounds.

    Returns:
        (is_valid, reason)
    """
    if value is None:
        return False, "Value is None"

    if not isinstance(value, (int, float)):
        return False, f"Invalid value type: {type(value)}"

    if math.isnan(value) or math.isinf(value):
        return False, f"Value is NaN or infinity: {value}"

    if prop.min is not None and value < prop.min:
        return False, f"Value {value} below minimum {prop.min}"
    if prop.max is not None and value > prop.max:
        return False, f"Value {value} above maximum {prop.max}"

    return True, "Value within range"
