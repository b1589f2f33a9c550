# formatting.py
from normalizer import require_finite


def format_score(score: float) -> str:
    """Fixed one decimal, e.g. 71.0 -> "71.0"."""
    return f"{require_finite(score, 'score'):.1f}"


def format_emissions(emissions: float) -> str:
    """
    Human-readable emissions in tonnes CO2e, scaled to K / M:
        950      -> "950.0 tCO₂e"
        12_500   -> "12.5K tCO₂e"
        3_400_000 -> "3.4M tCO₂e"
    """
    tonnes = require_finite(emissions, "emissions")
    if tonnes >= 1_000_000:
        return f"{tonnes / 1_000_000:.1f}M tCO₂e"
    if tonnes >= 1_000:
        return f"{tonnes / 1_000:.1f}K tCO₂e"
    return f"{tonnes:.1f} tCO₂e"
