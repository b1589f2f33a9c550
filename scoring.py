# scoring.py
import math
from typing import Dict, Mapping

from config import RATING_THRESHOLDS
from errors import InvalidInput, InvalidScoreRange
from models import (
    Category,
    CategoryScores,
    WeightingScheme,
    RatingBand,
    BenchmarkThresholds,
    DEFAULT_BENCHMARK_THRESHOLDS,
    ESGScoreResult,
)
from normalizer import round_half_even, SCORE_MIN, SCORE_MAX
from benchmarks import compare_to_benchmarks

# (band, inclusive lower bound), best band first
RATING_BANDS = tuple((RatingBand(band_name), lower_bound) for band_name, lower_bound in RATING_THRESHOLDS)


def weighted_combination(values_by_category: Mapping[Category, float], weights: WeightingScheme) -> float:
    """
    The methodology's linear combination: sum of value * weight over the
    three categories. Shared by the score aggregator and the impact
    projection so that both are linear in exactly the same weights.

    No rounding and no range check happen here.
    """
    return math.fsum(
        values_by_category[category] * weights.weight_for(category)
        for category in Category
    )


def aggregate(scores: CategoryScores, weights: WeightingScheme) -> float:
    """
    Combine the three category scores into the overall ESG score.

    Parameters:
        scores  : CategoryScores (each 0-100), or a plain mapping such as
                  {"environmental": 80, "social": 70, "governance": 60}
                  which is validated through CategoryScores.from_dict
        weights : the WeightingScheme to apply, e.g. MSCI_WEIGHTING
                  (environmental 0.4, social 0.3, governance 0.3)

    Both arguments validate themselves on construction, raising
    InvalidScoreRange / InvalidWeights, so anything reaching the sum is in
    range. Any other type of `scores` raises InvalidInput.

    Returns:
        overall score in [0, 100], rounded to 2 decimals (half-to-even)

    Example:
        aggregate(CategoryScores(80, 70, 60), MSCI_WEIGHTING) == 71.0
    """
    if isinstance(scores, Mapping):
        scores = CategoryScores.from_dict(scores)
    elif not isinstance(scores, CategoryScores):
        raise InvalidInput(
            f"scores must be CategoryScores or a mapping of category scores, got {type(scores).__name__}.",
            "scores",
        )

    overall_score = weighted_combination(
        {category: scores.get(category) for category in Category},
        weights,
    )

    # Float noise can push an all-100 input a hair past the domain edge
    overall_score = min(SCORE_MAX, max(SCORE_MIN, overall_score))

    return round_half_even(overall_score, 2)


def classify(overall: float) -> RatingBand:
    """
    Map an overall score to its letter rating.

    Grading scale (lower bounds inclusive):
      85+ -> AAA, 80+ -> AA, 75+ -> A, 70+ -> BBB, 65+ -> BB, 60+ -> B,
      below 60 -> CCC

    A score sitting exactly on a threshold gets the higher band: 85.00 is
    AAA, 84.99 is AA. Non-finite or out-of-range scores raise
    InvalidScoreRange; nothing is clamped.
    """
    if isinstance(overall, bool) or not isinstance(overall, (int, float)):
        raise InvalidScoreRange(f"overall must be a number in [0, 100], got {overall!r}.", "overall")
    if not math.isfinite(overall) or overall < SCORE_MIN or overall > SCORE_MAX:
        raise InvalidScoreRange(f"overall must be a finite number in [0, 100], got {overall!r}.", "overall")

    for rating_band, lower_bound in RATING_BANDS:
        if overall >= lower_bound:
            return rating_band

    # RATING_BANDS ends at -inf, so every finite score matched above
    raise AssertionError("rating table is not exhaustive")


def evaluate(
    scores: CategoryScores,
    weights: WeightingScheme,
    industry_average: float,
    thresholds: BenchmarkThresholds = DEFAULT_BENCHMARK_THRESHOLDS,
) -> ESGScoreResult:
    """
    Aggregate, classify and benchmark in one go.

    industry_average is the caller's sector average (see
    benchmarks.sector_average for the published table).
    """
    overall_score = aggregate(scores, weights)
    return ESGScoreResult(
        overall=overall_score,
        environmental=scores.environmental,
        social=scores.social,
        governance=scores.governance,
        rating=classify(overall_score),
        benchmarks=compare_to_benchmarks(overall_score, industry_average, thresholds),
    )


def score_breakdown(scores: CategoryScores, weights: WeightingScheme) -> Dict[str, float]:
    """
    Weighted contribution of each category to the overall score, for charts.

    Each contribution is rounded to 2 decimals on its own.
    """
    return {
        category.value: round_half_even(scores.get(category) * weights.weight_for(category), 2)
        for category in Category
    }
