# suggestions.py
import logging
from typing import List

from config import LLM_PROVIDER, LLM_API_KEY, LLM_MODEL
from models import ESGScoreResult, RatingBand

logger = logging.getLogger(__name__)

# Category scores below this are flagged as weak
WEAK_CATEGORY_SCORE = 60.0

# RULES is a list of (predicate, suggestion_text) pairs.
# Each predicate inspects an ESGScoreResult and returns True/False.
RULES = [
    # --- Category-level suggestions ---
    (
        lambda result: result.environmental < WEAK_CATEGORY_SCORE,
        "Raise the renewable energy share and set a science-based emissions reduction target.",
    ),
    (
        lambda result: result.environmental < WEAK_CATEGORY_SCORE,
        "Track water and waste intensity per unit of output and publish reduction goals.",
    ),
    (
        lambda result: result.social < WEAK_CATEGORY_SCORE,
        "Strengthen employee safety training and report lost-time injury rates.",
    ),
    (
        lambda result: result.social < WEAK_CATEGORY_SCORE,
        "Audit supply-chain labor practices against human rights due-diligence standards.",
    ),
    (
        lambda result: result.governance < WEAK_CATEGORY_SCORE,
        "Increase board independence and diversity; link executive pay to ESG targets.",
    ),
    (
        lambda result: result.governance < WEAK_CATEGORY_SCORE,
        "Formalize risk management and anti-corruption controls with board-level oversight.",
    ),

    # --- Benchmark suggestions ---
    (
        lambda result: result.overall < result.benchmarks.industry_average,
        "Overall score trails the industry average; prioritize the weakest category first.",
    ),
    (
        lambda result: not result.benchmarks.ftse4good_included,
        "Close the gap to the FTSE4Good inclusion threshold to widen investor reach.",
    ),
    (
        lambda result: result.benchmarks.ftse4good_included and not result.benchmarks.djsi_world_member,
        "Target DJSI World membership: improve disclosure quality and third-party assurance.",
    ),
    (
        lambda result: result.rating <= RatingBand.B,
        "Publish a credible ESG improvement roadmap; ratings at B or below deter ESG funds.",
    ),
]


def rule_based_suggestions(result: ESGScoreResult) -> List[str]:
    """
    Generate ESG improvement suggestions using static, rule-based heuristics.

    How it works:
    - We evaluate each (predicate, message) pair in RULES against the result.
    - If the predicate returns True, we include the message.
    - We deduplicate messages so we don't repeat the same tip twice.

    Fallback:
    - If no rules fire at all, we still return a generic "keep going" suggestion.
    """
    used_suggestion_texts = set()
    suggestion_list: List[str] = []

    for predicate_fn, suggestion_text in RULES:
        if predicate_fn(result) and suggestion_text not in used_suggestion_texts:
            used_suggestion_texts.add(suggestion_text)
            suggestion_list.append(suggestion_text)

    if not suggestion_list:
        suggestion_list.append(
            "ESG profile already leads its benchmarks; focus on assurance and continuous improvement."
        )

    return suggestion_list


def llm_supplement(result: ESGScoreResult, llm_summary_text: str) -> List[str]:
    """
    Generate AI-driven (LLM) ESG suggestions, up to 3 lines.

    Behavior:
    - If LLM_PROVIDER == "openai" and we have an API key, we call the OpenAI API.
    - If not configured, or if anything fails (import error, network error, etc.),
      we log a warning and return [] so scoring still works without AI.

    Parameters:
        result          : the scored ESG result
        llm_summary_text: short human-readable summary of the result

    Returns:
        List[str] of up to 3 unique suggestion strings.
    """
    if not (LLM_PROVIDER == "openai" and LLM_API_KEY):
        return []

    try:
        # Lazy import so the service can still run without openai installed.
        from openai import OpenAI

        openai_client = OpenAI(api_key=LLM_API_KEY)

        llm_prompt = (
            "You are an ESG analyst. Based on the score breakdown and summary, "
            "suggest up to 3 concise, actionable improvements. "
            "Avoid generic advice. Output as plain bullet lines (no numbering):\n\n"
            f"Scores: {result.to_dict()}\n"
            f"Summary: {llm_summary_text}"
        )

        completion_response = openai_client.chat.completions.create(
            model=LLM_MODEL,
            messages=[
                {"role": "user", "content": llm_prompt}
            ],
            temperature=0.2,
            max_tokens=180,
        )

        model_raw_text: str = completion_response.choices[0].message.content or ""

        # Strip bullets like "-" / "•", dedupe, cap at 3
        cleaned_suggestions: List[str] = []
        for raw_line in model_raw_text.splitlines():
            if not raw_line.strip():
                continue

            normalized_line = raw_line.strip("-• ").strip()

            if normalized_line and normalized_line not in cleaned_suggestions:
                cleaned_suggestions.append(normalized_line)

            if len(cleaned_suggestions) >= 3:
                break

        return cleaned_suggestions

    except Exception as exc:
        # A failed LLM call must not fail the request
        logger.warning("LLM suggestions unavailable: %s", exc)
        return []
