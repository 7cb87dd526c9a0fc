from __future__ import annotations
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from openrouter_client import OpenRouterClient
from engine import DecisionWizard, WizardError
from models import WizardStep
from screens import APP_NAME, APP_TAGLINE

# ---------- Pydantic IO models ----------
class DecisionPatchIn(BaseModel):
    title: Optional[str] = Field(None, examples=["是否读MBA"])
    description: Optional[str] = None
    opportunity_cost: Optional[str] = None

class OptionPatchIn(BaseModel):
    label: Optional[str] = None
    benefits: Optional[List[str]] = None
    costs: Optional[List[str]] = None

class MarginalPatchIn(BaseModel):
    action: Optional[str] = None
    current_level: Optional[float] = None
    marginal_benefit: Optional[str] = None
    marginal_cost: Optional[str] = None

class IncentiveIn(BaseModel):
    value: str

class OptionOut(BaseModel):
    id: str
    label: str
    benefits: List[str]
    costs: List[str]

class MarginalOut(BaseModel):
    action: str
    current_level: float
    marginal_benefit: str
    marginal_cost: str

class DecisionOut(BaseModel):
    title: str
    description: str
    options: List[OptionOut]
    opportunity_cost: str
    marginal_analysis: MarginalOut
    incentives: List[str]

class AdviceOut(BaseModel):
    summary: str
    critique: str
    recommendation: str
    score: float

class WizardStateOut(BaseModel):
    step: str
    progress: Optional[float] = None
    screen: Dict[str, Any]
    decision: DecisionOut
    advice: Optional[AdviceOut] = None
    notice: Optional[str] = None

class ReportOut(AdviceOut):
    title: str

# ---------- App ----------
def create_app(client: Optional[OpenRouterClient] = None) -> FastAPI:
    app = FastAPI(title=f"{APP_NAME} API", description=APP_TAGLINE, version="1.0.0")
    app.state.wizard = DecisionWizard(client=client or OpenRouterClient())

    @app.exception_handler(WizardError)
    def _wizard_error(request: Request, exc: WizardError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    def _state(request: Request) -> WizardStateOut:
        return WizardStateOut(**request.app.state.wizard.snapshot())

    @app.get("/v1/wizard", response_model=WizardStateOut)
    def get_state(request: Request):
        return _state(request)

    @app.post("/v1/wizard/next", response_model=WizardStateOut)
    def next_step(request: Request):
        # Analysis failures come back as `notice`, not as an HTTP error.
        request.app.state.wizard.next()
        return _state(request)

    @app.post("/v1/wizard/previous", response_model=WizardStateOut)
    def previous_step(request: Request):
        request.app.state.wizard.previous()
        return _state(request)

    @app.post("/v1/wizard/reset", response_model=WizardStateOut)
    def reset(request: Request):
        request.app.state.wizard.reset()
        return _state(request)

    @app.get("/v1/wizard/report", response_model=ReportOut)
    def get_report(request: Request):
        wizard: DecisionWizard = request.app.state.wizard
        if wizard.step != WizardStep.REPORT or wizard.advice is None:
            raise HTTPException(409, "Report not available yet")
        return ReportOut(title=wizard.decision.title, **wizard.advice.to_dict())

    @app.patch("/v1/decision", response_model=WizardStateOut)
    def patch_decision(request: Request, payload: DecisionPatchIn):
        wizard: DecisionWizard = request.app.state.wizard
        if payload.title is not None:
            wizard.set_title(payload.title)
        if payload.description is not None:
            wizard.set_description(payload.description)
        if payload.opportunity_cost is not None:
            wizard.set_opportunity_cost(payload.opportunity_cost)
        return _state(request)

    @app.post("/v1/decision/options", response_model=OptionOut)
    def add_option(request: Request):
        opt = request.app.state.wizard.add_option()
        return OptionOut(id=opt.id, label=opt.label, benefits=list(opt.benefits), costs=list(opt.costs))

    @app.patch("/v1/decision/options/{option_id}", response_model=WizardStateOut)
    def patch_option(request: Request, option_id: str, payload: OptionPatchIn):
        wizard: DecisionWizard = request.app.state.wizard
        if payload.label is not None:
            wizard.set_option_label(option_id, payload.label)
        if payload.benefits is not None:
            wizard.set_option_benefits(option_id, payload.benefits)
        if payload.costs is not None:
            wizard.set_option_costs(option_id, payload.costs)
        return _state(request)

    @app.patch("/v1/decision/marginal", response_model=WizardStateOut)
    def patch_marginal(request: Request, payload: MarginalPatchIn):
        wizard: DecisionWizard = request.app.state.wizard
        if payload.action is not None:
            wizard.set_marginal_action(payload.action)
        if payload.current_level is not None:
            wizard.set_marginal_current_level(payload.current_level)
        if payload.marginal_benefit is not None:
            wizard.set_marginal_benefit(payload.marginal_benefit)
        if payload.marginal_cost is not None:
            wizard.set_marginal_cost(payload.marginal_cost)
        return _state(request)

    @app.post("/v1/decision/incentives", response_model=WizardStateOut)
    def add_incentive(request: Request):
        request.app.state.wizard.add_incentive()
        return _state(request)

    @app.put("/v1/decision/incentives/{index}", response_model=WizardStateOut)
    def set_incentive(request: Request, index: int, payload: IncentiveIn):
        request.app.state.wizard.set_incentive(index, payload.value)
        return _state(request)

    return app

app = create_app()
