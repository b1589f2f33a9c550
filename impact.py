# impact.py
import math
from typing import Iterable, List

from config import PARAMETER_IMPACT_MULTIPLIERS, DEFAULT_IMPACT_MULTIPLIER, CROSS_CATEGORY_EFFECTS
from models import (
    Category,
    CategoryScores,
    WeightingScheme,
    BenchmarkThresholds,
    DEFAULT_BENCHMARK_THRESHOLDS,
    ESGScoreResult,
    ParameterChange,
    ParameterImpactResult,
)
from normalizer import clamp, require_finite, require_non_negative, round_half_even, SCORE_MIN, SCORE_MAX
from scoring import weighted_combination, evaluate


def project_impact(changes: Iterable[ParameterChange], weights: WeightingScheme) -> ParameterImpactResult:
    """
    Project a set of parameter changes onto the category and overall scores.

    Deltas are summed per category (a category with no changes gets 0) and
    the overall impact is the same weighted combination scoring.aggregate()
    uses. The model is linear, so for any base score where nothing
    saturates:

        aggregate(base + deltas) - aggregate(base) == overall_impact

    up to 2-decimal rounding of the overall figures. Category impacts are
    kept unrounded so that apply_impact() lands exactly on base + deltas.
    The order of `changes` does not matter.
    """
    deltas_by_category = {category: [] for category in Category}
    for change in changes:
        deltas_by_category[change.category].append(change.delta)

    # fsum is exact, so the totals do not depend on the order of the changes
    category_impacts = {
        category: math.fsum(category_deltas)
        for category, category_deltas in deltas_by_category.items()
    }
    overall_impact = weighted_combination(category_impacts, weights)

    return ParameterImpactResult(
        environmental_impact=category_impacts[Category.ENVIRONMENTAL],
        social_impact=category_impacts[Category.SOCIAL],
        governance_impact=category_impacts[Category.GOVERNANCE],
        overall_impact=round_half_even(overall_impact, 2),
    )


def apply_impact(
    base: ESGScoreResult,
    impact: ParameterImpactResult,
    weights: WeightingScheme,
    thresholds: BenchmarkThresholds = DEFAULT_BENCHMARK_THRESHOLDS,
) -> ESGScoreResult:
    """
    Apply a projected impact to a base result and re-classify it.

    Steps:
        1. Add each category impact to the base category score.
        2. Clamp each category to [0, 100]; a real score cannot leave that domain.
        3. Re-aggregate the clamped scores with `weights`.
        4. Re-classify the rating and re-run the benchmark comparison,
           keeping the base result's industry average.

    Because clamping happens per category before re-aggregation, the new
    overall can differ from base.overall + impact.overall_impact whenever a
    category saturates at 0 or 100. Example with the MSCI weights:
    environmental 98 + 10 clamps to 100, so the overall only rises by 0.8,
    not by the projected 4.0.
    """
    base_scores = base.category_scores
    projected_scores = CategoryScores(**{
        category.value: clamp(
            base_scores.get(category) + impact.impact_for(category),
            SCORE_MIN,
            SCORE_MAX,
        )
        for category in Category
    })
    return evaluate(projected_scores, weights, base.benchmarks.industry_average, thresholds)


def changes_from_parameter_update(
    parameter_name: str,
    category,
    current_value,
    new_value,
    weight=1.0,
) -> List[ParameterChange]:
    """
    Translate a move of a named ESG parameter (e.g. the renewable energy
    slider going from 40% to 55%) into per-category score changes.

    base_impact = (new_value - current_value) * weight * multiplier

    The parameter's own category receives base_impact; the two other
    categories receive a spillover share of it (CROSS_CATEGORY_EFFECTS).
    Multipliers come from PARAMETER_IMPACT_MULTIPLIERS, with
    DEFAULT_IMPACT_MULTIPLIER for unlisted parameters.

    Returns one ParameterChange per category, ids "<parameter_name>:<category>".
    """
    primary_category = Category.parse(category)
    value_delta = require_finite(new_value, "new_value") - require_finite(current_value, "current_value")
    impact_weight = require_non_negative(weight, "weight")
    multiplier = PARAMETER_IMPACT_MULTIPLIERS.get(parameter_name.lower(), DEFAULT_IMPACT_MULTIPLIER)

    base_impact = value_delta * impact_weight * multiplier
    spillover = CROSS_CATEGORY_EFFECTS[primary_category.value]

    generated_changes = []
    for target_category in Category:
        share = 1.0 if target_category is primary_category else spillover[target_category.value]
        generated_changes.append(ParameterChange(
            id=f"{parameter_name}:{target_category.value}",
            category=target_category,
            delta=base_impact * share,
        ))
    return generated_changes
