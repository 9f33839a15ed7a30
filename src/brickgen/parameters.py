"""
Parameter surface for UI/CLI collaborators.

PARAMETER_DEFINITIONS lists every BrickParameters field with its control type,
bounds and default, in the order a parameter panel shows them.
parameters_from_mapping() turns a raw mapping (CLI flags, JSON, form values)
into a bounds-checked BrickParameters.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import Enum
from fractions import Fraction
from typing import Any, Dict, Mapping, Optional, Tuple

from brickgen.contracts import BottomType, BrickParameters, BrickType, StudType
from brickgen.errors import InvalidParameter

HEIGHT_TOLERANCE = 1e-3


@dataclass(frozen=True)
class ParameterDefinition:
    """One control in the parameter panel."""

    name: str  # BrickParameters field
    key: str  # camelCase key used by UI collaborators
    kind: str  # "int" | "choice" | "checkbox" | "slider"
    default: Any
    caption: str
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    step: Optional[float] = None
    choices: Tuple[Any, ...] = ()
    captions: Tuple[str, ...] = ()
    group: str = "basic"


PARAMETER_DEFINITIONS: Tuple[ParameterDefinition, ...] = (
    ParameterDefinition("width", "width", "int", 2, "Width (studs):", minimum=1, maximum=32),
    ParameterDefinition("length", "length", "int", 4, "Length (studs):", minimum=1, maximum=32),
    ParameterDefinition(
        "height", "height", "choice", 1.0, "Height:",
        choices=(1 / 3, 0.5, 1, 2, 3, 4, 5, 6),
        captions=("1/3 (plate)", "1/2", "1 (brick)", "2", "3", "4", "5", "6"),
    ),
    ParameterDefinition(
        "type", "type", "choice", BrickType.BRICK, "Type:",
        choices=tuple(BrickType),
        captions=("Brick (with studs)", "Tile (smooth top)", "Baseplate (solid underside)"),
    ),
    ParameterDefinition(
        "stud_type", "studType", "choice", StudType.SOLID, "Stud Type:",
        choices=tuple(StudType), captions=("Solid", "Hollow"),
    ),
    ParameterDefinition(
        "bottom_type", "bottomType", "choice", BottomType.OPEN, "Bottom Type:",
        choices=tuple(BottomType), captions=("Open (standard)", "Closed (solid)"),
    ),
    ParameterDefinition("horizontal_holes", "horizontalHoles", "checkbox", False, "Technic Holes:"),
    ParameterDefinition("vertical_axle_holes", "verticalAxleHoles", "checkbox", False, "Axle Holes:"),
    ParameterDefinition("include_splines", "includeSplines", "checkbox", True, "Wall Splines:", group="advanced"),
    ParameterDefinition("with_posts", "withPosts", "checkbox", True, "Interior Posts:", group="advanced"),
    ParameterDefinition("use_reinforcement", "useReinforcement", "checkbox", False, "Reinforcement:", group="advanced"),
    ParameterDefinition(
        "stud_rescale", "studRescale", "slider", 1.0, "Stud Scale:",
        minimum=0.9, maximum=1.1, step=0.01, group="advanced",
    ),
    ParameterDefinition(
        "stud_top_roundness", "studTopRoundness", "slider", 0.0, "Stud Roundness:",
        minimum=0.0, maximum=1.0, step=0.1, group="advanced",
    ),
    ParameterDefinition(
        "segments", "segments", "int", 64, "Curve Segments:",
        minimum=16, maximum=128, group="advanced",
    ),
)

_BY_NAME = {d.name: d for d in PARAMETER_DEFINITIONS}
_BY_KEY = {d.key: d for d in PARAMETER_DEFINITIONS}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _check_bounds(definition: ParameterDefinition, value: float) -> None:
    if definition.minimum is not None and value < definition.minimum:
        raise InvalidParameter(definition.name, value, f"below minimum {definition.minimum}")
    if definition.maximum is not None and value > definition.maximum:
        raise InvalidParameter(definition.name, value, f"above maximum {definition.maximum}")


def _coerce_int(definition: ParameterDefinition, raw: Any) -> int:
    try:
        number = float(raw)
    except (TypeError, ValueError):
        raise InvalidParameter(definition.name, raw, "expected an integer") from None
    if isinstance(raw, bool) or not number.is_integer():
        raise InvalidParameter(definition.name, raw, "expected an integer")
    value = int(number)
    _check_bounds(definition, value)
    return value


def _coerce_float(definition: ParameterDefinition, raw: Any) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidParameter(definition.name, raw, "expected a number") from None
    if isinstance(raw, bool) or not math.isfinite(value):
        raise InvalidParameter(definition.name, raw, "expected a finite number")
    _check_bounds(definition, value)
    return value


def _coerce_bool(definition: ParameterDefinition, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise InvalidParameter(definition.name, raw, "expected true/false")


def _coerce_enum(definition: ParameterDefinition, raw: Any) -> Enum:
    enum_type = type(definition.default)
    if isinstance(raw, enum_type):
        return raw
    try:
        return enum_type(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise InvalidParameter(definition.name, raw, f"expected one of: {allowed}") from None


def coerce_height(raw: Any) -> float:
    """Quantize a height to 1/3, 1/2 or a positive integer ratio.

    Accepts numbers and fraction strings such as ``"1/3"``.
    """
    try:
        value = float(Fraction(str(raw).strip())) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError, ZeroDivisionError):
        raise InvalidParameter("height", raw, "expected a number or fraction") from None
    if isinstance(raw, bool) or not math.isfinite(value) or value <= 0:
        raise InvalidParameter("height", raw, "must be a positive number")
    for ratio in (1 / 3, 0.5):
        if abs(value - ratio) < HEIGHT_TOLERANCE:
            return ratio
    if abs(value - round(value)) < HEIGHT_TOLERANCE:
        return float(round(value))
    raise InvalidParameter("height", raw, "must be 1/3, 1/2 or a whole number of blocks")


def _coerce(definition: ParameterDefinition, raw: Any) -> Any:
    if definition.name == "height":
        return coerce_height(raw)
    if definition.kind == "int":
        return _coerce_int(definition, raw)
    if definition.kind == "slider":
        return _coerce_float(definition, raw)
    if definition.kind == "checkbox":
        return _coerce_bool(definition, raw)
    return _coerce_enum(definition, raw)


def parameters_from_mapping(values: Optional[Mapping[str, Any]] = None) -> BrickParameters:
    """Build BrickParameters from snake_case or camelCase keys.

    Missing keys take their defaults; ``None`` values count as missing.

    Raises:
        InvalidParameter: unknown key or out-of-bounds value.
    """
    values = dict(values or {})
    resolved: Dict[str, Any] = {}
    for raw_key, raw in values.items():
        definition = _BY_NAME.get(raw_key) or _BY_KEY.get(raw_key)
        if definition is None:
            raise InvalidParameter(raw_key, raw, "unknown parameter")
        if raw is not None:
            resolved[definition.name] = _coerce(definition, raw)
    for definition in PARAMETER_DEFINITIONS:
        resolved.setdefault(definition.name, definition.default)
    return BrickParameters(**resolved)


def default_parameters() -> BrickParameters:
    return parameters_from_mapping({})


def parameters_to_dict(params: BrickParameters) -> Dict[str, Any]:
    """JSON-friendly view: enums become their string values."""
    payload: Dict[str, Any] = {}
    for f in fields(params):
        value = getattr(params, f.name)
        payload[f.name] = value.value if isinstance(value, Enum) else value
    return payload
