"""
Strict decoding of free-form predictor output into a 48-slot vector.

Decoding never raises. A response that does not contain an array of exactly
48 elements is a failure; inside a well-sized array, an element that is not a
finite number in [0, 100] becomes 0 and is reported as a warning.
"""
import json
import math
import re
from typing import Any, List, Optional

from ..domain import DecodeResult, SLOTS_PER_DAY
from .aggregator import round_half_up

_CODE_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_FLAT_ARRAY = re.compile(r"\[[^\[\]]*\]")

def _parse_array(span: str) -> Optional[List[Any]]:
    try:
        parsed = json.loads(span)
    except ValueError:
        inner = span.strip()[1:-1].strip()
        if not inner:
            return []
        return [token.strip().strip("'\"") for token in inner.split(",")]
    return parsed if isinstance(parsed, list) else None

def extract_array(text: str) -> Optional[List[Any]]:
    """
    First array found in the text, preferring one with exactly 48 elements.
    """
    fenced = _CODE_FENCE.search(text)
    body = fenced.group(1) if fenced else text

    try:
        parsed = json.loads(body.strip())
        if isinstance(parsed, list) and all(not isinstance(item, list) for item in parsed):
            return parsed
    except ValueError:
        pass

    first = None
    for match in _FLAT_ARRAY.finditer(body):
        candidate = _parse_array(match.group(0))
        if candidate is None:
            continue
        if len(candidate) == SLOTS_PER_DAY:
            return candidate
        if first is None:
            first = candidate
    return first

def _to_percent(item: Any) -> Optional[int]:
    if isinstance(item, bool):
        return None
    if isinstance(item, (int, float)):
        number = float(item)
    elif isinstance(item, str):
        try:
            number = float(item.strip().rstrip("%"))
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number) or number < 0 or number > 100:
        return None
    return round_half_up(number)

def decode_prediction_response(text: Optional[str]) -> DecodeResult:
    if not text or not text.strip():
        return DecodeResult.failure("empty response")

    items = extract_array(text)
    if items is None:
        return DecodeResult.failure("no array found in response")
    if len(items) != SLOTS_PER_DAY:
        return DecodeResult.failure(f"expected {SLOTS_PER_DAY} values, got {len(items)}")

    values = []
    warnings = []
    for index, item in enumerate(items):
        value = _to_percent(item)
        if value is None:
            warnings.append(f"invalid value at index {index}: {item!r}, using 0")
            value = 0
        values.append(value)
    return DecodeResult.success(values, tuple(warnings))
