# app.py
import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

from config import DEFAULT_SCHEME_NAME, LOG_LEVEL, HOST, PORT, SECTOR_AVERAGES, MSCI_WORLD_ESG_AVERAGE
from errors import EngineError
from models import (
    ScorePayload,
    ImpactPayload,
    ParameterUpdatePayload,
    WEIGHTING_SCHEMES,
    DEFAULT_BENCHMARK_THRESHOLDS,
    DEFAULT_REGULATORY_THRESHOLDS,
    get_weighting_scheme,
)
from scoring import RATING_BANDS, evaluate, score_breakdown
from benchmarks import regulatory_readiness, industry_position, sector_average
from impact import project_impact, apply_impact, changes_from_parameter_update
from suggestions import rule_based_suggestions, llm_supplement
from formatting import format_score
from normalizer import require_score, round_half_even

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("esg_score_api")

app = Flask(__name__)
CORS(app)


def resolve_scheme(scheme_name):
    """
    Pick the weighting scheme for this request: the one named in the
    payload, otherwise the service default (ESG_SCHEME env var).
    """
    return get_weighting_scheme(scheme_name or DEFAULT_SCHEME_NAME)


def resolve_industry_average(payload: ScorePayload) -> float:
    """An explicit industry_average wins over the sector lookup."""
    if payload.industry_average is not None:
        return require_score(payload.industry_average, "industry_average")
    return sector_average(payload.sector)


def validation_error(details):
    return jsonify({"error": "validation_error", "details": details}), 400


@app.errorhandler(EngineError)
def handle_engine_error(exc: EngineError):
    # Engine errors are the caller's fault (bad numbers, bad scheme), never a 500
    logger.info("Rejected request to %s: %s (%s)", request.path, exc.message, exc.kind)
    return jsonify({"error": exc.kind, "details": [exc.message]}), 400


@app.route("/score", methods=["POST"])
def score():
    """
    POST /score

    Request body JSON example:
    {
      "environmental": 80,
      "social": 70,
      "governance": 60,
      "scheme": "msci",          # optional
      "industry_average": 65     # or "sector": "technology"
    }

    Response JSON includes the classified result, the weighted breakdown,
    regulatory readiness, position against the industry and suggestions.
    """
    request_data = request.get_json(silent=True) or {}
    payload = ScorePayload.from_dict(request_data)

    validation_errors = payload.validate()
    if validation_errors:
        return validation_error(validation_errors)

    weights = resolve_scheme(payload.scheme)
    industry_average = resolve_industry_average(payload)
    category_scores = payload.category_scores()

    result = evaluate(category_scores, weights, industry_average, DEFAULT_BENCHMARK_THRESHOLDS)
    logger.info("Scored %s -> %s (%s) with scheme %s", category_scores.to_dict(), result.overall,
                result.rating.value, weights.name)

    llm_summary_text = (
        f"Overall={format_score(result.overall)} ({result.rating.value}), "
        f"E={format_score(result.environmental)}, "
        f"S={format_score(result.social)}, "
        f"G={format_score(result.governance)}, "
        f"industry average={format_score(industry_average)}"
    )

    rule_suggestion_list = rule_based_suggestions(result)
    ai_suggestion_list = llm_supplement(result, llm_summary_text)

    # Merge both suggestion lists, keeping order but removing duplicates
    merged_suggestion_list = []
    seen_suggestions = set()
    for suggestion_text in (rule_suggestion_list + ai_suggestion_list):
        if suggestion_text and suggestion_text not in seen_suggestions:
            seen_suggestions.add(suggestion_text)
            merged_suggestion_list.append(suggestion_text)

    response_body = {
        **result.to_dict(),
        "scheme": weights.to_dict(),
        "breakdown": score_breakdown(category_scores, weights),
        "regulatory": regulatory_readiness(result.overall, DEFAULT_REGULATORY_THRESHOLDS).to_dict(),
        "industry_position": industry_position(result.overall, industry_average),
        "suggestions": merged_suggestion_list,
        "ai_suggestions": ai_suggestion_list,
        "rule_suggestions": rule_suggestion_list,
    }
    return jsonify(response_body), 200


@app.route("/impact", methods=["POST"])
def impact():
    """
    POST /impact

    Request body JSON example:
    {
      "base": {"environmental": 98, "social": 70, "governance": 60},
      "changes": [{"id": "solar-farm", "category": "environmental", "delta": 10}],
      "scheme": "msci",
      "industry_average": 65
    }

    Response:
      base        : the classified base result
      projection  : per-category and overall impact (linear, unclamped)
      projected   : base + impact with categories clamped to [0, 100]
      naive_overall : base.overall + projection.overall_impact, which
                      differs from projected.overall when a category saturates
    """
    request_data = request.get_json(silent=True) or {}
    payload = ImpactPayload.from_dict(request_data)

    validation_errors = payload.validate()
    if validation_errors:
        return validation_error(validation_errors)

    weights = resolve_scheme(payload.base.scheme)
    base_result = evaluate(
        payload.base.category_scores(),
        weights,
        resolve_industry_average(payload.base),
        DEFAULT_BENCHMARK_THRESHOLDS,
    )

    parameter_changes = payload.parameter_changes()
    projection = project_impact(parameter_changes, weights)
    projected_result = apply_impact(base_result, projection, weights, DEFAULT_BENCHMARK_THRESHOLDS)
    logger.info("Projected %d change(s): overall %s -> %s", len(parameter_changes), base_result.overall,
                projected_result.overall)

    return jsonify({
        "scheme": weights.to_dict(),
        "base": base_result.to_dict(),
        "projection": projection.to_dict(),
        "projected": projected_result.to_dict(),
        "naive_overall": round_half_even(base_result.overall + projection.overall_impact, 2),
        "rating_changed": projected_result.rating != base_result.rating,
    }), 200


@app.route("/parameter-impact", methods=["POST"])
def parameter_impact():
    """
    POST /parameter-impact

    Request body JSON example:
    {
      "parameter_name": "renewable_energy_percentage",
      "category": "environmental",
      "current_value": 40,
      "new_value": 55,
      "weight": 1.0,
      "scheme": "msci"
    }

    Returns the per-category changes the move implies and their projection.
    """
    request_data = request.get_json(silent=True) or {}
    payload = ParameterUpdatePayload.from_dict(request_data)

    validation_errors = payload.validate()
    if validation_errors:
        return validation_error(validation_errors)

    weights = resolve_scheme(payload.scheme)
    generated_changes = changes_from_parameter_update(
        payload.parameter_name,
        payload.category,
        payload.current_value,
        payload.new_value,
        payload.weight,
    )
    projection = project_impact(generated_changes, weights)

    return jsonify({
        "scheme": weights.to_dict(),
        "changes": [change.to_dict() for change in generated_changes],
        "projection": projection.to_dict(),
    }), 200


@app.route("/schemes", methods=["GET"])
def schemes():
    """GET /schemes: the shipped weighting schemes and which one is the default."""
    return jsonify({
        "default": DEFAULT_SCHEME_NAME,
        "schemes": [scheme.to_dict() for scheme in WEIGHTING_SCHEMES.values()],
    }), 200


@app.route("/benchmarks", methods=["GET"])
def benchmarks():
    """
    GET /benchmarks

    Static methodology tables consumers need for display:
    rating bands, index thresholds, regulatory thresholds, sector averages.
    """
    return jsonify({
        "rating_bands": [
            # CCC's lower bound is -inf, which JSON cannot carry
            {"rating": rating_band.value, "min_score": max(lower_bound, 0.0)}
            for rating_band, lower_bound in RATING_BANDS
        ],
        "global": {
            "sp500_average": DEFAULT_BENCHMARK_THRESHOLDS.sp500_average,
            "msci_world_esg_average": MSCI_WORLD_ESG_AVERAGE,
            "ftse4good_threshold": DEFAULT_BENCHMARK_THRESHOLDS.ftse4good,
            "djsi_world_threshold": DEFAULT_BENCHMARK_THRESHOLDS.djsi_world,
        },
        "regulatory": {
            "eu_taxonomy_alignment": DEFAULT_REGULATORY_THRESHOLDS.eu_taxonomy_alignment,
            "csrd_readiness": DEFAULT_REGULATORY_THRESHOLDS.csrd_readiness,
            "tcfd_compliance": DEFAULT_REGULATORY_THRESHOLDS.tcfd_compliance,
            "sec_climate_readiness": DEFAULT_REGULATORY_THRESHOLDS.sec_climate_readiness,
        },
        "sectors": {sector_name: dict(averages) for sector_name, averages in SECTOR_AVERAGES.items()},
    }), 200


if __name__ == "__main__":
    # NOTE: debug stays off here; use `flask --app app run --debug` for local development
    app.run(host=HOST, port=PORT)
