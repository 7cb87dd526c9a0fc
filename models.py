from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Tuple

class WizardStep(str, Enum):
    STEP0 = "step0"      # define the scenario
    STEP1 = "step1"      # trade-offs (options)
    STEP2 = "step2"      # opportunity cost
    STEP3 = "step3"      # marginal thinking
    STEP4 = "step4"      # incentives
    LOADING = "loading"
    REPORT = "report"

INPUT_STEPS: Tuple[WizardStep, ...] = (
    WizardStep.STEP0,
    WizardStep.STEP1,
    WizardStep.STEP2,
    WizardStep.STEP3,
    WizardStep.STEP4,
)

@dataclass(frozen=True)
class Option:
    id: str
    label: str = ""
    benefits: Tuple[str, ...] = ("",)
    costs: Tuple[str, ...] = ("",)

@dataclass(frozen=True)
class MarginalFactor:
    action: str = ""
    # Part of the record shape; no screen edits it yet.
    current_level: float = 0
    marginal_benefit: str = ""
    marginal_cost: str = ""

@dataclass(frozen=True)
class DecisionState:
    title: str = ""
    description: str = ""
    options: Tuple[Option, ...] = (Option(id="1"),)
    opportunity_cost: str = ""
    marginal_analysis: MarginalFactor = field(default_factory=MarginalFactor)
    incentives: Tuple[str, ...] = ("",)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["options"] = [
            {**o, "benefits": list(o["benefits"]), "costs": list(o["costs"])}
            for o in data["options"]
        ]
        data["incentives"] = list(self.incentives)
        return data

@dataclass(frozen=True)
class AIAdvice:
    summary: str
    critique: str
    recommendation: str
    # Rationality score, expected 0-100; the range is not enforced.
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

def new_decision() -> DecisionState:
    """Fresh default decision: one empty option, one empty incentive."""
    return DecisionState()
