import json

import pytest
import requests

from analysis import AnalysisError, analyze_decision, build_analysis_prompt, parse_advice
from models import AIAdvice, DecisionState, MarginalFactor, Option
from prompts import ADVICE_RESPONSE_FORMAT

MBA = DecisionState(
    title="是否读MBA",
    description="工作五年，想转型做管理",
    options=(Option(id="1", label="读书", benefits=("涨薪",), costs=("学费",)),),
    opportunity_cost="放弃工作两年",
    marginal_analysis=MarginalFactor(action="多学一年", marginal_benefit="更高起薪", marginal_cost="机会成本上升"),
    incentives=("父母期望",),
)

def test_prompt_contains_every_field_in_order():
    prompt = build_analysis_prompt(MBA)
    pieces = ["是否读MBA", "工作五年，想转型做管理", "读书", "涨薪", "学费", "放弃工作两年",
              "多学一年", "更高起薪", "机会成本上升", "父母期望"]
    positions = [prompt.index(p) for p in pieces]
    assert positions == sorted(positions)

def test_prompt_option_and_incentive_rendering():
    decision = DecisionState(
        options=(
            Option(id="1", label="读书", benefits=("涨薪", "人脉"), costs=("学费",)),
            Option(id="2", label="工作", benefits=("收入",), costs=("停滞", "焦虑")),
        ),
        incentives=("父母期望", "低利率"),
    )
    prompt = build_analysis_prompt(decision)
    assert "读书(收益:涨薪/人脉, 成本:学费); 工作(收益:收入, 成本:停滞/焦虑)" in prompt
    assert "父母期望, 低利率" in prompt

def test_analyze_sends_one_prompt_with_schema(dummy_client, advice_payload):
    client = dummy_client
    advice = analyze_decision(client, MBA)
    assert advice == AIAdvice(**advice_payload)
    assert len(client.calls) == 1
    call = client.calls[0]
    assert call["messages"] == [{"role": "user", "content": build_analysis_prompt(MBA)}]
    assert call["extra"] == {"response_format": ADVICE_RESPONSE_FORMAT}
    schema = ADVICE_RESPONSE_FORMAT["json_schema"]["schema"]
    assert schema["required"] == ["summary", "critique", "recommendation", "score"]

def test_parse_accepts_fenced_json(advice_payload):
    advice = parse_advice("```json\n" + json.dumps(advice_payload, ensure_ascii=False) + "\n```")
    assert advice.score == 72

def test_score_range_not_enforced(advice_payload):
    advice = parse_advice(json.dumps({**advice_payload, "score": 140}))
    assert advice.score == 140

@pytest.mark.parametrize("render", [
    lambda a: "",
    lambda a: "{}",
    lambda a: "[1, 2]",
    lambda a: "分析失败",
    lambda a: json.dumps({k: v for k, v in a.items() if k != "recommendation"}),
    lambda a: json.dumps({**a, "score": "85"}),
    lambda a: json.dumps({**a, "summary": None}),
])
def test_parse_rejects_incomplete_or_malformed(advice_payload, render):
    with pytest.raises(AnalysisError):
        parse_advice(render(advice_payload))

@pytest.mark.parametrize("error", [
    requests.ConnectionError("offline"),
    requests.Timeout("slow"),
    RuntimeError("OpenRouter error 500: boom"),
    ValueError("bad json body"),
    OSError("Could not find a suitable TLS CA certificate bundle"),
    KeyError("choices"),
])
def test_transport_errors_become_analysis_error(make_client, error):
    with pytest.raises(AnalysisError):
        analyze_decision(make_client(error=error), MBA)
