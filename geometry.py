from __future__ import annotations
import math
import re

INCHES_TO_PX = 96.0
CM_TO_PX = INCHES_TO_PX / 2.54
MM_TO_PX = CM_TO_PX / 10
PT_TO_PX = INCHES_TO_PX / 72.0
PC_TO_PX = PT_TO_PX * 12
DEFAULT_FONT_SIZE = 16.0

UNIT_FACTORS = {
    '': 1.0,
    'px': 1.0,
    'pt': PT_TO_PX,
    'pc': PC_TO_PX,
    'in': INCHES_TO_PX,
    'cm': CM_TO_PX,
    'mm': MM_TO_PX,
    'em': DEFAULT_FONT_SIZE,
    'ex': DEFAULT_FONT_SIZE / 2,
}

number_pattern = re.compile(r'^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z%]*)$')

def parse_number_with_unit(value) -> tuple[float, str]:
    if isinstance(value, (int, float)):
        return (float(value), "")
    if not value or not isinstance(value, str):
        return (0.0, "")

    match = number_pattern.match(value.strip())
    if not match:
        return (0.0, "")

    num_value = float(match.group(1))
    if math.isnan(num_value) or math.isinf(num_value):
        return (0.0, "")
    return (num_value, match.group(2).lower())

def normalize_unit(value, reference: float = None) -> float:
    num_value, unit = parse_number_with_unit(value)

    if unit == '%':
        if reference is None:
            return num_value
        return num_value / 100.0 * reference

    return num_value * UNIT_FACTORS.get(unit, 1.0)

def diagonal_reference(width: float, height: float) -> float:
    # percentages of non-directional lengths resolve against the normalized diagonal
    return math.sqrt((width * width + height * height) / 2.0)

def parse_number_list(value: str) -> list[float]:
    if not value:
        return []
    numbers = []
    for part in re.split(r'[\s,]+', value.strip()):
        if not part:
            continue
        try:
            numbers.append(float(part))
        except ValueError:
            break
    return numbers
