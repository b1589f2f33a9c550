# benchmarks.py
from config import SECTOR_AVERAGES, INDUSTRY_PARITY_BAND
from errors import InvalidInput
from models import (
    Category,
    BenchmarkThresholds,
    BenchmarkFlags,
    DEFAULT_BENCHMARK_THRESHOLDS,
    RegulatoryThresholds,
    RegulatoryReadiness,
    DEFAULT_REGULATORY_THRESHOLDS,
)
from normalizer import require_score


def compare_to_benchmarks(
    overall: float,
    industry_average: float,
    thresholds: BenchmarkThresholds = DEFAULT_BENCHMARK_THRESHOLDS,
) -> BenchmarkFlags:
    """
    Compare an overall score against global index inclusion thresholds.

    Parameters:
        overall          : overall ESG score, 0-100
        industry_average : sector average supplied by the caller; this module
                           never looks it up on its own
        thresholds       : FTSE4Good / DJSI World cut-offs, defaults 75 / 78

    Both scores go through the same check: numeric strings are accepted,
    non-finite values raise InvalidInput and values outside [0, 100] raise
    InvalidScoreRange. Both flags are inclusive: a score of exactly 75.0 is
    FTSE4Good-included.
    """
    overall_score = require_score(overall, "overall")
    return BenchmarkFlags(
        sp500_average=thresholds.sp500_average,
        industry_average=require_score(industry_average, "industry_average"),
        ftse4good_included=overall_score >= thresholds.ftse4good,
        djsi_world_member=overall_score >= thresholds.djsi_world,
    )


def regulatory_readiness(
    overall: float,
    thresholds: RegulatoryThresholds = DEFAULT_REGULATORY_THRESHOLDS,
) -> RegulatoryReadiness:
    """Inclusive readiness flags for EU Taxonomy, CSRD, TCFD and SEC climate rules."""
    overall_score = require_score(overall, "overall")
    return RegulatoryReadiness(
        eu_taxonomy_aligned=overall_score >= thresholds.eu_taxonomy_alignment,
        csrd_ready=overall_score >= thresholds.csrd_readiness,
        tcfd_compliant=overall_score >= thresholds.tcfd_compliance,
        sec_climate_ready=overall_score >= thresholds.sec_climate_readiness,
    )


def industry_position(overall: float, industry_average: float) -> str:
    """
    Qualitative position against the sector: "above", "in_line" or "below".
    Scores within INDUSTRY_PARITY_BAND points of the average are "in_line".
    """
    gap = require_score(overall, "overall") - require_score(industry_average, "industry_average")
    if gap > INDUSTRY_PARITY_BAND:
        return "above"
    if gap < -INDUSTRY_PARITY_BAND:
        return "below"
    return "in_line"


def sector_average(sector: str, category: str = "overall") -> float:
    """
    Published average for a sector, e.g. sector_average("energy") == 58.0.

    `category` is "overall" or one of the three ESG categories.
    """
    sector_key = str(sector).strip().lower().replace(" ", "_")
    if sector_key not in SECTOR_AVERAGES:
        raise InvalidInput(f"Unknown sector {sector!r}; expected one of {sorted(SECTOR_AVERAGES)}.", "sector")

    category_key = "overall" if category == "overall" else Category.parse(category).value
    return SECTOR_AVERAGES[sector_key][category_key]
