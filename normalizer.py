# normalizer.py
import math
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Any, Dict, Iterable, Mapping

from config import PARAMETER_SCALE, EMISSION_FACTORS
from errors import InvalidInput, InvalidScoreRange

SCORE_MIN = 0.0
SCORE_MAX = 100.0

CATEGORY_NAMES = ("environmental", "social", "governance")


def clamp(value: float, lower_bound: float, upper_bound: float) -> float:
    """
    Restrict `value` to stay within [lower_bound, upper_bound].
    """
    return max(lower_bound, min(upper_bound, value))


def require_finite(value: Any, field: str = "value") -> float:
    """
    Coerce `value` to a finite float.

    Numeric strings ("72.5") are accepted because upstream data often carries
    decimals as text. Booleans, None, non-numeric strings, NaN and +-inf are
    rejected with InvalidInput.
    """
    if value is None:
        raise InvalidInput(f"{field} is required.", field)
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be a number, got a boolean.", field)
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{field} must be a number, got {value!r}.", field)
    if not math.isfinite(number):
        raise InvalidInput(f"{field} must be finite, got {number}.", field)
    return number


def require_score(value: Any, field: str = "score") -> float:
    """
    Validate a 0-100 score. Out-of-range values are an error, never clamped.
    """
    number = require_finite(value, field)
    if number < SCORE_MIN or number > SCORE_MAX:
        raise InvalidScoreRange(f"{field} must be within [0, 100], got {number}.", field)
    return number


def require_non_negative(value: Any, field: str = "quantity") -> float:
    """Validate a physical quantity (energy, emissions, mass...)."""
    number = require_finite(value, field)
    if number < 0:
        raise InvalidInput(f"{field} must be >= 0, got {number}.", field)
    return number


def normalize_parameter_value(parameter_name: str, raw_value: Any) -> float:
    """
    Convert a raw ESG parameter reading into a 0-100 score.

    Percentage parameters (renewable share, board diversity...) are used
    as-is; efficiency style metrics are scaled up first (see PARAMETER_SCALE).
    The result is capped at 100 and floored at 0.
    """
    number = require_finite(raw_value, parameter_name)
    scale = PARAMETER_SCALE.get(parameter_name.lower(), 1.0)
    return clamp(number * scale, SCORE_MIN, SCORE_MAX)


def category_scores_from_parameters(parameters: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    """
    Roll raw parameter readings up into one score per category.

    Each parameter is a mapping like:
        {"parameter_name": "renewable_energy_percentage",
         "category": "environmental",
         "current_value": "42.5",
         "impact_weight": "1.0"}

    The category score is the impact-weight-weighted mean of the normalized
    parameter values. A category with no parameters scores 0.

    Returns:
        {"environmental": <float>, "social": <float>, "governance": <float>}
    """
    weighted_sums = {name: 0.0 for name in CATEGORY_NAMES}
    weight_totals = {name: 0.0 for name in CATEGORY_NAMES}

    for parameter in parameters:
        parameter_name = str(parameter.get("parameter_name", ""))
        category = str(parameter.get("category", "")).lower()
        if category not in weighted_sums:
            raise InvalidInput(f"Unknown category {category!r} for parameter {parameter_name!r}.", "category")

        normalized_value = normalize_parameter_value(parameter_name, parameter.get("current_value"))
        impact_weight = require_non_negative(parameter.get("impact_weight", 1.0), "impact_weight")

        weighted_sums[category] += normalized_value * impact_weight
        weight_totals[category] += impact_weight

    return {
        name: (weighted_sums[name] / weight_totals[name]) if weight_totals[name] > 0 else 0.0
        for name in CATEGORY_NAMES
    }


def emission_factor(source: str, variant: str) -> float:
    """Look up a kg CO2e factor, e.g. emission_factor("electricity", "uk")."""
    try:
        return EMISSION_FACTORS[source][variant]
    except KeyError:
        raise InvalidInput(f"No emission factor for {source}/{variant}.", "emission_factor")


def co2_equivalent(activity: Any, factor: Any, unit: str = "kg") -> float:
    """
    Convert an activity quantity into tonnes of CO2e.

    `factor` is expressed in `unit` of CO2e per unit of activity. Factors in
    kg (the usual case) are converted to tonnes; factors already in tonnes
    pass through unchanged.
    """
    activity_amount = require_non_negative(activity, "activity")
    factor_value = require_non_negative(factor, "emission_factor")
    emissions = activity_amount * factor_value

    if unit == "kg":
        return emissions / 1000.0
    if unit == "t":
        return emissions
    raise InvalidInput(f"Unsupported emission factor unit {unit!r}.", "unit")


def round_half_even(value: float, places: int = 2) -> float:
    """
    Round to `places` decimals, ties to even, on the decimal value as printed.

    round() works on the binary representation, so round(2.675, 2) gives 2.67;
    going through Decimal(repr) makes 2.675 -> 2.68 and 2.665 -> 2.66.
    """
    # floats this large carry no fractional digits; quantize would overflow the context
    if abs(value) >= 1e15:
        return float(value)
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_EVEN))
