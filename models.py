# models.py
import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import List, Dict, Any, Mapping

from config import (
    SCHEME_WEIGHTS,
    WEIGHT_SUM_TOLERANCE,
    FTSE4GOOD_THRESHOLD,
    DJSI_WORLD_THRESHOLD,
    SP500_AVERAGE,
    REGULATORY_THRESHOLDS,
    SECTOR_AVERAGES,
)
from errors import EngineError, InvalidInput, InvalidWeights
from normalizer import require_finite, require_score, require_non_negative, round_half_even


class Category(Enum):
    """The three ESG categories. No other tag is accepted."""

    ENVIRONMENTAL = "environmental"
    SOCIAL = "social"
    GOVERNANCE = "governance"

    @classmethod
    def parse(cls, raw_value: Any) -> "Category":
        """
        Accept a Category or its string tag (case-insensitive).
        Anything else raises InvalidInput instead of being ignored.
        """
        if isinstance(raw_value, cls):
            return raw_value
        try:
            return cls(str(raw_value).strip().lower())
        except ValueError:
            raise InvalidInput(
                f"category must be one of environmental/social/governance, got {raw_value!r}.",
                "category",
            )


class RatingBand(Enum):
    """
    Letter rating, ordered best to worst.

    Comparisons follow quality, so RatingBand.AAA > RatingBand.BBB.
    """

    AAA = "AAA"
    AA = "AA"
    A = "A"
    BBB = "BBB"
    BB = "BB"
    B = "B"
    CCC = "CCC"

    @property
    def rank(self) -> int:
        # 0 for AAA, 6 for CCC
        return list(type(self)).index(self)

    def __lt__(self, other):
        if not isinstance(other, RatingBand):
            return NotImplemented
        return self.rank > other.rank

    def __le__(self, other):
        if not isinstance(other, RatingBand):
            return NotImplemented
        return self.rank >= other.rank

    def __gt__(self, other):
        if not isinstance(other, RatingBand):
            return NotImplemented
        return self.rank < other.rank

    def __ge__(self, other):
        if not isinstance(other, RatingBand):
            return NotImplemented
        return self.rank <= other.rank


@dataclass(frozen=True)
class CategoryScores:
    """
    Environmental / social / governance sub-scores, each within [0, 100].

    Construction validates and coerces every field; out-of-range values raise
    InvalidScoreRange and are never clamped here.
    """

    environmental: float
    social: float
    governance: float

    def __post_init__(self):
        for category in Category:
            checked_value = require_score(getattr(self, category.value), category.value)
            object.__setattr__(self, category.value, checked_value)

    @classmethod
    def from_dict(cls, raw_dict: Mapping[str, Any]) -> "CategoryScores":
        return cls(
            environmental=raw_dict.get("environmental"),
            social=raw_dict.get("social"),
            governance=raw_dict.get("governance"),
        )

    def get(self, category: Category) -> float:
        return getattr(self, Category.parse(category).value)

    def to_dict(self) -> Dict[str, float]:
        return {category.value: getattr(self, category.value) for category in Category}


@dataclass(frozen=True)
class WeightingScheme:
    """
    A named, versioned set of category weights.

    Weights must be finite, non-negative and sum to 1 within
    WEIGHT_SUM_TOLERANCE; otherwise InvalidWeights is raised.
    """

    name: str
    version: str
    environmental: float
    social: float
    governance: float

    def __post_init__(self):
        weight_values = []
        for category in Category:
            weight_value = require_finite(getattr(self, category.value), f"{category.value} weight")
            if weight_value < 0:
                raise InvalidWeights(
                    f"Scheme {self.name!r}: {category.value} weight must be >= 0, got {weight_value}.",
                    category.value,
                )
            object.__setattr__(self, category.value, weight_value)
            weight_values.append(weight_value)

        weight_sum = math.fsum(weight_values)
        if abs(weight_sum - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise InvalidWeights(f"Scheme {self.name!r}: weights must sum to 1.0, got {weight_sum!r}.", "weights")

    def weight_for(self, category: Category) -> float:
        return getattr(self, Category.parse(category).value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "weights": {category.value: getattr(self, category.value) for category in Category},
        }


def _build_schemes() -> Mapping[str, WeightingScheme]:
    schemes = {}
    for scheme_name, (version, (w_env, w_soc, w_gov)) in SCHEME_WEIGHTS.items():
        schemes[scheme_name] = WeightingScheme(scheme_name, version, w_env, w_soc, w_gov)
    return MappingProxyType(schemes)


WEIGHTING_SCHEMES = _build_schemes()
MSCI_WEIGHTING = WEIGHTING_SCHEMES["msci"]
EQUAL_WEIGHTING = WEIGHTING_SCHEMES["equal"]


def get_weighting_scheme(name: str) -> WeightingScheme:
    """Look up a shipped scheme by name; unknown names raise InvalidInput."""
    try:
        return WEIGHTING_SCHEMES[str(name).strip().lower()]
    except KeyError:
        raise InvalidInput(
            f"Unknown weighting scheme {name!r}; expected one of {sorted(WEIGHTING_SCHEMES)}.",
            "scheme",
        )


@dataclass(frozen=True)
class BenchmarkThresholds:
    """Index inclusion thresholds and the reference S&P 500 average."""

    name: str = "global"
    ftse4good: float = FTSE4GOOD_THRESHOLD
    djsi_world: float = DJSI_WORLD_THRESHOLD
    sp500_average: float = SP500_AVERAGE

    def __post_init__(self):
        for threshold_field in ("ftse4good", "djsi_world", "sp500_average"):
            object.__setattr__(self, threshold_field, require_score(getattr(self, threshold_field), threshold_field))


DEFAULT_BENCHMARK_THRESHOLDS = BenchmarkThresholds()


@dataclass(frozen=True)
class RegulatoryThresholds:
    """Overall-score levels at which a company is considered ready for each regime."""

    eu_taxonomy_alignment: float = REGULATORY_THRESHOLDS["eu_taxonomy_alignment"]
    csrd_readiness: float = REGULATORY_THRESHOLDS["csrd_readiness"]
    tcfd_compliance: float = REGULATORY_THRESHOLDS["tcfd_compliance"]
    sec_climate_readiness: float = REGULATORY_THRESHOLDS["sec_climate_readiness"]

    def __post_init__(self):
        for threshold_field in REGULATORY_THRESHOLDS:
            object.__setattr__(self, threshold_field, require_score(getattr(self, threshold_field), threshold_field))


DEFAULT_REGULATORY_THRESHOLDS = RegulatoryThresholds()


@dataclass(frozen=True)
class BenchmarkFlags:
    sp500_average: float
    industry_average: float
    ftse4good_included: bool
    djsi_world_member: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sp500_average": self.sp500_average,
            "industry_average": self.industry_average,
            "ftse4good_included": self.ftse4good_included,
            "djsi_world_member": self.djsi_world_member,
        }


@dataclass(frozen=True)
class RegulatoryReadiness:
    eu_taxonomy_aligned: bool
    csrd_ready: bool
    tcfd_compliant: bool
    sec_climate_ready: bool

    def to_dict(self) -> Dict[str, bool]:
        return {
            "eu_taxonomy_aligned": self.eu_taxonomy_aligned,
            "csrd_ready": self.csrd_ready,
            "tcfd_compliant": self.tcfd_compliant,
            "sec_climate_ready": self.sec_climate_ready,
        }


@dataclass(frozen=True)
class ESGScoreResult:
    """
    A fully classified score. Only the engine builds these: `overall` is
    always derived from the category scores by scoring.aggregate().
    """

    overall: float
    environmental: float
    social: float
    governance: float
    rating: RatingBand
    benchmarks: BenchmarkFlags

    @property
    def category_scores(self) -> CategoryScores:
        return CategoryScores(self.environmental, self.social, self.governance)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "environmental": self.environmental,
            "social": self.social,
            "governance": self.governance,
            "rating": self.rating.value,
            "benchmarks": self.benchmarks.to_dict(),
        }


@dataclass(frozen=True)
class ParameterChange:
    """
    A hypothetical signed point change to one category score.

    Changes are independent of each other; duplicate ids are allowed and
    simply add up.
    """

    id: str
    category: Category
    delta: float

    def __post_init__(self):
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "category", Category.parse(self.category))
        object.__setattr__(self, "delta", require_finite(self.delta, f"delta of change {self.id!r}"))

    @staticmethod
    def from_dict(raw_dict: Mapping[str, Any]) -> "ParameterChange":
        return ParameterChange(
            id=raw_dict.get("id", ""),
            category=raw_dict.get("category"),
            delta=raw_dict.get("delta"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "category": self.category.value, "delta": self.delta}


@dataclass(frozen=True)
class ParameterImpactResult:
    """
    Category impacts are the exact sums of their deltas, so apply_impact()
    works on unrounded figures. overall_impact is rounded to 2 decimals like
    every overall score; to_dict() rounds the category impacts for display.
    """

    environmental_impact: float
    social_impact: float
    governance_impact: float
    overall_impact: float

    def impact_for(self, category: Category) -> float:
        return getattr(self, f"{Category.parse(category).value}_impact")

    def to_dict(self) -> Dict[str, float]:
        return {
            "environmental_impact": round_half_even(self.environmental_impact, 2),
            "social_impact": round_half_even(self.social_impact, 2),
            "governance_impact": round_half_even(self.governance_impact, 2),
            "overall_impact": self.overall_impact,
        }


# ---------------------------------------------------------------------------
# Request payloads (HTTP layer)
#
# Payloads keep the raw JSON values; validate() reports every field that is
# missing or malformed, and the engine coerces numeric strings afterwards.
# ---------------------------------------------------------------------------


def _collect_error(error_messages: List[str], check, *args) -> None:
    try:
        check(*args)
    except EngineError as exc:
        error_messages.append(exc.message)


@dataclass
class ScorePayload:
    """
    ScorePayload represents the request body for /score (and the `base`
    object inside /impact).

    Fields:
      environmental, social, governance : category scores, 0-100.
      scheme           : optional weighting scheme name (e.g. "msci").
      industry_average : optional sector average supplied by the caller.
      sector           : optional sector name, used to look up an average
                         when industry_average is not given.
    """

    environmental: Any = None
    social: Any = None
    governance: Any = None
    scheme: str = ""
    industry_average: Any = None
    sector: str = ""

    @staticmethod
    def from_dict(raw_dict: Dict[str, Any]) -> "ScorePayload":
        return ScorePayload(
            environmental=raw_dict.get("environmental"),
            social=raw_dict.get("social"),
            governance=raw_dict.get("governance"),
            scheme=str(raw_dict.get("scheme") or "").strip(),
            industry_average=raw_dict.get("industry_average"),
            sector=str(raw_dict.get("sector") or "").strip().lower().replace(" ", "_"),
        )

    def validate(self) -> List[str]:
        """
        Returns:
            A list of human-readable error strings. Empty list means "valid".
        """
        error_messages: List[str] = []

        for category in Category:
            _collect_error(error_messages, require_score, getattr(self, category.value), category.value)

        # A malformed industry_average is reported even when a sector is also given
        if self.industry_average is not None:
            _collect_error(error_messages, require_score, self.industry_average, "industry_average")
        elif not self.sector:
            error_messages.append("industry_average or sector is required.")
        elif self.sector not in SECTOR_AVERAGES:
            error_messages.append(f"sector must be one of {sorted(SECTOR_AVERAGES)}.")

        if self.scheme:
            _collect_error(error_messages, get_weighting_scheme, self.scheme)

        return error_messages

    def category_scores(self) -> CategoryScores:
        return CategoryScores(self.environmental, self.social, self.governance)


@dataclass
class ImpactPayload:
    """
    Request body for /impact:
      {"base": {"environmental": 98, "social": 70, "governance": 60},
       "changes": [{"id": "solar", "category": "environmental", "delta": 10}],
       "scheme": "msci", "industry_average": 65}

    A missing `changes` key means an empty change set; anything else that is
    not a list of objects is a validation error.
    """

    base: ScorePayload
    changes: Any = field(default_factory=list)

    @staticmethod
    def from_dict(raw_dict: Dict[str, Any]) -> "ImpactPayload":
        raw_base = raw_dict.get("base")
        base_dict = dict(raw_base) if isinstance(raw_base, dict) else {}
        # scheme and benchmark inputs may sit on the base object or at the top level
        for shared_key in ("scheme", "industry_average", "sector"):
            if shared_key in raw_dict and shared_key not in base_dict:
                base_dict[shared_key] = raw_dict[shared_key]

        raw_changes = raw_dict.get("changes")
        return ImpactPayload(
            base=ScorePayload.from_dict(base_dict),
            changes=[] if raw_changes is None else raw_changes,
        )

    def validate(self) -> List[str]:
        error_messages = [f"base.{message}" for message in self.base.validate()]

        if not isinstance(self.changes, list):
            error_messages.append("changes must be a list.")
            return error_messages

        for change_index, raw_change in enumerate(self.changes):
            if not isinstance(raw_change, dict):
                error_messages.append(f"changes[{change_index}]: must be an object.")
                continue
            try:
                ParameterChange.from_dict(raw_change)
            except EngineError as exc:
                error_messages.append(f"changes[{change_index}]: {exc.message}")
        return error_messages

    def parameter_changes(self) -> List[ParameterChange]:
        return [ParameterChange.from_dict(raw_change) for raw_change in self.changes]


@dataclass
class ParameterUpdatePayload:
    """Request body for /parameter-impact (one slider move on a named parameter)."""

    parameter_name: str
    category: str
    current_value: Any = None
    new_value: Any = None
    weight: Any = 1.0
    scheme: str = ""

    @staticmethod
    def from_dict(raw_dict: Dict[str, Any]) -> "ParameterUpdatePayload":
        return ParameterUpdatePayload(
            parameter_name=str(raw_dict.get("parameter_name", "")).strip(),
            category=str(raw_dict.get("category", "")).strip(),
            current_value=raw_dict.get("current_value"),
            new_value=raw_dict.get("new_value"),
            weight=raw_dict.get("weight", 1.0),
            scheme=str(raw_dict.get("scheme") or "").strip(),
        )

    def validate(self) -> List[str]:
        error_messages: List[str] = []

        if not self.parameter_name:
            error_messages.append("parameter_name is required.")

        _collect_error(error_messages, Category.parse, self.category)

        for numeric_field_name in ("current_value", "new_value"):
            _collect_error(error_messages, require_finite, getattr(self, numeric_field_name), numeric_field_name)
        _collect_error(error_messages, require_non_negative, self.weight, "weight")

        if self.scheme:
            _collect_error(error_messages, get_weighting_scheme, self.scheme)

        return error_messages
