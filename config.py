# config.py
import os
from types import MappingProxyType

# ---------------------------------------------------------------------------
# Methodology tables. These are fixed at import time and never read from the
# environment; engine calls receive them explicitly from the caller.
# ---------------------------------------------------------------------------

# Category weights per scheme, (environmental, social, governance). Each must sum to 1.0
SCHEME_WEIGHTS = MappingProxyType({
    "msci": ("2024.1", (0.4, 0.3, 0.3)),        # environmental-weighted (MSCI style)
    "equal": ("2024.1", (1 / 3, 1 / 3, 1 / 3)),
})

# Tolerance used when checking that a scheme sums to 1.0
WEIGHT_SUM_TOLERANCE = 1e-9

# Rating bands, best first. Lower bounds are inclusive; CCC catches everything below 60
RATING_THRESHOLDS = (
    ("AAA", 85.0),
    ("AA", 80.0),
    ("A", 75.0),
    ("BBB", 70.0),
    ("BB", 65.0),
    ("B", 60.0),
    ("CCC", float("-inf")),
)

# Global index inclusion thresholds and reference averages
FTSE4GOOD_THRESHOLD = 75.0
DJSI_WORLD_THRESHOLD = 78.0
SP500_AVERAGE = 68.0
MSCI_WORLD_ESG_AVERAGE = 71.0

# Regulatory readiness thresholds on the overall score
REGULATORY_THRESHOLDS = MappingProxyType({
    "eu_taxonomy_alignment": 80.0,
    "csrd_readiness": 75.0,
    "tcfd_compliance": 70.0,
    "sec_climate_readiness": 72.0,
})

# Overall score within this many points of the industry average counts as "in line"
INDUSTRY_PARITY_BAND = 0.5

# Published sector averages. Callers look these up and pass the number in.
SECTOR_AVERAGES = MappingProxyType({
    "technology": MappingProxyType({"overall": 72.0, "environmental": 75.0, "social": 68.0, "governance": 73.0}),
    "manufacturing": MappingProxyType({"overall": 65.0, "environmental": 62.0, "social": 67.0, "governance": 66.0}),
    "financial_services": MappingProxyType({"overall": 70.0, "environmental": 68.0, "social": 72.0, "governance": 71.0}),
    "healthcare": MappingProxyType({"overall": 69.0, "environmental": 67.0, "social": 73.0, "governance": 67.0}),
    "energy": MappingProxyType({"overall": 58.0, "environmental": 52.0, "social": 62.0, "governance": 60.0}),
    "utilities": MappingProxyType({"overall": 71.0, "environmental": 78.0, "social": 65.0, "governance": 69.0}),
})

# Raw parameter -> 0..100 score scaling. Anything not listed is already a percentage
PARAMETER_SCALE = MappingProxyType({
    "water_efficiency": 10.0,
    "waste_reduction": 2.0,
})

# How strongly a one-point move of a named parameter shifts its category score
PARAMETER_IMPACT_MULTIPLIERS = MappingProxyType({
    "renewable_energy_percentage": 0.8,
    "ghg_emissions_reduction": 1.2,
    "employee_safety_training": 0.6,
    "board_diversity_ratio": 0.7,
    "water_efficiency": 0.5,
})
DEFAULT_IMPACT_MULTIPLIER = 0.5

# Spillover of a parameter move onto the other two categories, keyed by primary category
CROSS_CATEGORY_EFFECTS = MappingProxyType({
    "environmental": MappingProxyType({"social": 0.2, "governance": 0.1}),
    "social": MappingProxyType({"environmental": 0.15, "governance": 0.25}),
    "governance": MappingProxyType({"environmental": 0.1, "social": 0.2}),
})

# Emission factors in kg CO2e per unit of activity (EPA eGRID 2022, EU average, DEFRA 2024)
EMISSION_FACTORS = MappingProxyType({
    "electricity": MappingProxyType({"us": 0.386, "eu": 0.275, "uk": 0.193}),    # per kWh
    "natural_gas": MappingProxyType({"us": 0.181, "eu": 0.185, "uk": 0.184}),    # per kWh
    "transport": MappingProxyType({"diesel": 2.67, "gasoline": 2.31, "aviation": 3.15}),  # per liter
})

# ---------------------------------------------------------------------------
# Service settings (HTTP layer only)
# ---------------------------------------------------------------------------

# Weighting scheme used by the API when a request does not name one
DEFAULT_SCHEME_NAME = os.getenv("ESG_SCHEME", "msci")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5055"))

# Optional LLM hook (off by default)
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "")          # e.g., "openai"
LLM_API_KEY = os.getenv("LLM_API_KEY", "")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
