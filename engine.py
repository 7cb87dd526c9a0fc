from __future__ import annotations
import itertools
import logging
import threading
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

from analysis import AnalysisError, analyze_decision
from models import (
    AIAdvice,
    DecisionState,
    INPUT_STEPS,
    MarginalFactor,
    Option,
    WizardStep,
    new_decision,
)
from openrouter_client import OpenRouterClient
from screens import FAILURE_NOTICE, screen_for

logger = logging.getLogger(__name__)

# (step, action) -> next step. STEP4 + "next" goes through LOADING and is
# resolved by the analysis outcome, see DecisionWizard.next().
TRANSITIONS: Dict[tuple, WizardStep] = {
    (WizardStep.STEP0, "next"): WizardStep.STEP1,
    (WizardStep.STEP1, "next"): WizardStep.STEP2,
    (WizardStep.STEP2, "next"): WizardStep.STEP3,
    (WizardStep.STEP3, "next"): WizardStep.STEP4,
    (WizardStep.STEP4, "next"): WizardStep.LOADING,
    (WizardStep.LOADING, "succeeded"): WizardStep.REPORT,
    (WizardStep.LOADING, "failed"): WizardStep.STEP4,
    (WizardStep.STEP1, "previous"): WizardStep.STEP0,
    (WizardStep.STEP2, "previous"): WizardStep.STEP1,
    (WizardStep.STEP3, "previous"): WizardStep.STEP2,
    (WizardStep.STEP4, "previous"): WizardStep.STEP3,
    (WizardStep.REPORT, "reset"): WizardStep.STEP0,
}

class WizardError(ValueError):
    """Action not allowed in the current step."""

class DecisionWizard:
    """
    Drives one decision through five input steps, the analysis call and the report.
    - STEP0..STEP4: field edits and next/previous, no validation gate.
    - STEP4 "next": snapshot the decision, call the analysis once, then REPORT or back to STEP4.
    - REPORT "reset": start over with a fresh default decision.
    """
    def __init__(self, client: OpenRouterClient):
        self.client = client
        self._step = WizardStep.STEP0
        self._decision = new_decision()
        self._advice: Optional[AIAdvice] = None
        self._notice: Optional[str] = None
        # Option ids handed out by this wizard; "1" belongs to the default option.
        self._option_ids = itertools.count(2)
        self._lock = threading.Lock()

    # ---------- read-only views ----------
    @property
    def step(self) -> WizardStep:
        return self._step

    @property
    def decision(self) -> DecisionState:
        return self._decision

    @property
    def advice(self) -> Optional[AIAdvice]:
        return self._advice

    @property
    def notice(self) -> Optional[str]:
        return self._notice

    @property
    def progress(self) -> Optional[float]:
        """Percent through the input steps; None on the loading/report screens."""
        if self._step not in INPUT_STEPS:
            return None
        return 100.0 * INPUT_STEPS.index(self._step) / (len(INPUT_STEPS) - 1)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "step": self._step.value,
            "progress": self.progress,
            "screen": screen_for(self._step),
            "decision": self._decision.to_dict(),
            "advice": self._advice.to_dict() if self._advice else None,
            "notice": self._notice,
        }

    # ---------- navigation ----------
    def next(self) -> WizardStep:
        # Check-and-enter LOADING atomically: endpoints run on a threadpool.
        with self._lock:
            target = self._transition("next")
            if target is not WizardStep.LOADING:
                return self._enter(target)
            frozen = self._decision
            self._enter(WizardStep.LOADING)

        advice: Optional[AIAdvice] = None
        try:
            advice = analyze_decision(self.client, frozen)
        except AnalysisError as e:
            logger.warning("Analysis failed: %s", e)
        finally:
            # Never leave LOADING behind, whatever the call did.
            with self._lock:
                if advice is None:
                    self._notice = FAILURE_NOTICE
                    self._enter(self._transition("failed"), clear_notice=False)
                else:
                    self._advice = advice
                    self._enter(self._transition("succeeded"))
        return self._step

    def previous(self) -> WizardStep:
        return self._enter(self._transition("previous"))

    def reset(self) -> WizardStep:
        target = self._transition("reset")
        self._decision = new_decision()
        self._advice = None
        return self._enter(target)

    def _transition(self, action: str) -> WizardStep:
        target = TRANSITIONS.get((self._step, action))
        if target is None:
            raise WizardError(f"Cannot {action} from {self._step.value}")
        return target

    def _enter(self, step: WizardStep, clear_notice: bool = True) -> WizardStep:
        logger.debug("Wizard %s -> %s", self._step.value, step.value)
        self._step = step
        if clear_notice:
            self._notice = None
        return step

    # ---------- field edits ----------
    def set_title(self, value: str) -> DecisionState:
        return self._update(title=value)

    def set_description(self, value: str) -> DecisionState:
        return self._update(description=value)

    def add_option(self) -> Option:
        taken = {o.id for o in self._decision.options}
        option_id = str(next(self._option_ids))
        while option_id in taken:
            option_id = str(next(self._option_ids))
        option = Option(id=option_id)
        self._update(options=self._decision.options + (option,))
        return option

    def set_option_label(self, option_id: str, value: str) -> DecisionState:
        return self._update_option(option_id, label=value)

    def set_option_benefits(self, option_id: str, values: Sequence[str]) -> DecisionState:
        return self._update_option(option_id, benefits=tuple(values))

    def set_option_costs(self, option_id: str, values: Sequence[str]) -> DecisionState:
        return self._update_option(option_id, costs=tuple(values))

    def set_opportunity_cost(self, value: str) -> DecisionState:
        return self._update(opportunity_cost=value)

    def set_marginal_action(self, value: str) -> DecisionState:
        return self._update_marginal(action=value)

    def set_marginal_current_level(self, value: float) -> DecisionState:
        return self._update_marginal(current_level=value)

    def set_marginal_benefit(self, value: str) -> DecisionState:
        return self._update_marginal(marginal_benefit=value)

    def set_marginal_cost(self, value: str) -> DecisionState:
        return self._update_marginal(marginal_cost=value)

    def add_incentive(self) -> DecisionState:
        return self._update(incentives=self._decision.incentives + ("",))

    def set_incentive(self, index: int, value: str) -> DecisionState:
        incentives = list(self._decision.incentives)
        if not 0 <= index < len(incentives):
            raise WizardError(f"No incentive at index {index}")
        incentives[index] = value
        return self._update(incentives=tuple(incentives))

    # ---------- helpers ----------
    def _update(self, **changes: Any) -> DecisionState:
        if self._step not in INPUT_STEPS:
            raise WizardError(f"Cannot edit the decision while in {self._step.value}")
        self._decision = replace(self._decision, **changes)
        return self._decision

    def _update_option(self, option_id: str, **changes: Any) -> DecisionState:
        options = self._decision.options
        for i, o in enumerate(options):
            if o.id == option_id:
                updated = replace(o, **changes)
                return self._update(options=options[:i] + (updated,) + options[i + 1:])
        raise WizardError(f"Unknown option id {option_id!r}")

    def _update_marginal(self, **changes: Any) -> DecisionState:
        marginal: MarginalFactor = replace(self._decision.marginal_analysis, **changes)
        return self._update(marginal_analysis=marginal)
