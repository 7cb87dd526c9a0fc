from __future__ import annotations
import json
import logging
import re

from pydantic import BaseModel, ConfigDict, ValidationError

from models import AIAdvice, DecisionState
from openrouter_client import OpenRouterClient
from prompts import (
    ADVICE_RESPONSE_FORMAT,
    ANALYSIS_PROMPT_TEMPLATE,
    INCENTIVE_SEPARATOR,
    OPTION_SEPARATOR,
    OPTION_TEMPLATE,
)

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

class AnalysisError(RuntimeError):
    """The analysis could not be produced; no partial advice exists."""

class _AdviceOut(BaseModel):
    # Strict: "85" is not a score, a missing field is not an empty string.
    model_config = ConfigDict(strict=True)

    summary: str
    critique: str
    recommendation: str
    score: float

def _render_options(decision: DecisionState) -> str:
    return OPTION_SEPARATOR.join(
        OPTION_TEMPLATE.format(label=o.label, benefits="/".join(o.benefits), costs="/".join(o.costs))
        for o in decision.options
    )

def build_analysis_prompt(decision: DecisionState) -> str:
    m = decision.marginal_analysis
    return ANALYSIS_PROMPT_TEMPLATE.format(
        title=decision.title,
        description=decision.description,
        options=_render_options(decision),
        opportunity_cost=decision.opportunity_cost,
        action=m.action,
        marginal_benefit=m.marginal_benefit,
        marginal_cost=m.marginal_cost,
        incentives=INCENTIVE_SEPARATOR.join(decision.incentives),
    )

def parse_advice(content: str) -> AIAdvice:
    text = (content or "").strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)
    if not text:
        raise AnalysisError("Empty analysis response")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Analysis response is not JSON: {e}") from e
    if not isinstance(raw, dict):
        raise AnalysisError("Analysis response is not a JSON object")
    try:
        out = _AdviceOut.model_validate(raw)
    except ValidationError as e:
        raise AnalysisError(f"Analysis response does not match schema: {e}") from e
    return AIAdvice(
        summary=out.summary,
        critique=out.critique,
        recommendation=out.recommendation,
        score=out.score,
    )

def analyze_decision(client: OpenRouterClient, decision: DecisionState) -> AIAdvice:
    """
    One request, one answer: no retries. Every failure (transport, auth,
    upstream status, unparseable or incomplete reply) becomes AnalysisError.
    """
    messages = [{"role": "user", "content": build_analysis_prompt(decision)}]
    try:
        content = client.chat(messages=messages, temperature=0.2, extra={"response_format": ADVICE_RESPONSE_FORMAT})
    except Exception as e:
        # requests can also raise plain OSError (e.g. a missing CA bundle).
        raise AnalysisError(f"{type(e).__name__}: {e}") from e
    advice = parse_advice(content)
    logger.info("Analysis completed for %r (score=%s)", decision.title, advice.score)
    return advice
