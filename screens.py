"""
Fixed display strings for the six wizard screens (five input steps + report).

The product ships in Chinese only; nothing here is configurable.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from models import WizardStep

class Principle(str, Enum):
    TRADE_OFFS = "人们面临权衡取舍"
    OPPORTUNITY_COST = "某种东西的成本是为了得到它所放弃的东西"
    MARGINAL_THINKING = "理性人考虑边际量"
    INCENTIVES = "人们会对激励做出反应"

APP_NAME = "EconoDecide"
APP_TAGLINE = "基于曼昆《经济学原理》的理性决策辅助系统"
BADGE = "经济学原理应用"

PROGRESS_LABELS: Tuple[str, ...] = ("定义场景", "权衡取舍", "机会成本", "边际分析", "激励因素")

NEXT_LABEL = "下一步 →"
SUBMIT_LABEL = "生成分析报告 →"
PREVIOUS_LABEL = "← 返回上一步"

LOADING_TITLE = "正在应用经济学模型进行深度分析..."
LOADING_SUBTITLE = "理性思维需要一点时间，请稍候"

FAILURE_NOTICE = "分析生成失败，请检查网络或 API Key。"

@dataclass(frozen=True)
class StepScreen:
    title: str
    subtitle: str
    principle: Principle
    fields: Tuple[Tuple[str, str], ...]  # (label, placeholder)
    tip: Optional[str] = None
    add_label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["principle"] = self.principle.value
        data["fields"] = [{"label": label, "placeholder": hint} for label, hint in self.fields]
        return data

STEP_SCREENS: Dict[WizardStep, StepScreen] = {
    WizardStep.STEP0: StepScreen(
        title="你想解决什么问题？",
        subtitle="首先，让我们明确你的决策背景。没有免费的午餐，任何决定都有代价。",
        principle=Principle.TRADE_OFFS,
        fields=(
            ("决策主题", "例如：我是否应该辞职去读 MBA？"),
            ("详细描述 (背景信息)", "提供一些背景，帮助模型理解你的现状、偏好和目标..."),
        ),
    ),
    WizardStep.STEP1: StepScreen(
        title="人们面临权衡取舍",
        subtitle="为了得到一件喜爱的东西，通常不得不放弃另一件。请列出你的候选方案。",
        principle=Principle.TRADE_OFFS,
        fields=(
            ("方案名称", "方案名称"),
            ("潜在收益 (Benefits)", "每行一个收益..."),
            ("潜在代价 (Costs)", "每行一个代价..."),
        ),
        add_label="+ 添加候选方案",
    ),
    WizardStep.STEP2: StepScreen(
        title="何为机会成本？",
        subtitle="决策不仅要看可见的成本，更要考虑为了得到 A 而必须放弃的 B 的价值。",
        principle=Principle.OPPORTUNITY_COST,
        fields=(
            ("机会成本", "例如：如果我去读书，我将放弃两年的薪水（约 50 万）以及在当前公司的晋升机会..."),
        ),
        tip="如果你选择目前最倾向的方案，你必须牺牲掉的最具吸引力的替代品是什么？它的价值（时间、金钱、情绪等）如何衡量？",
    ),
    WizardStep.STEP3: StepScreen(
        title="理性人考虑边际量",
        subtitle="生活中的决策很少是‘全或无’。试着分析‘再多做一点’的价值。",
        principle=Principle.MARGINAL_THINKING,
        fields=(
            ("分析的具体动作", "例如：每天多投入 1 小时学习"),
            ("边际收益 (MB)", "这个额外动作带来的增量好处..."),
            ("边际成本 (MC)", "这个额外动作产生的增量代价..."),
        ),
    ),
    WizardStep.STEP4: StepScreen(
        title="人们对激励做出反应",
        subtitle="哪些外部因素（奖金、税收、舆论）或内在动力（成就感、恐惧）在影响你？",
        principle=Principle.INCENTIVES,
        fields=(
            ("激励因素", "激励因素 {n} (例如：父母的期望、当前的低利率...)"),
        ),
        add_label="+ 添加更多影响因素",
    ),
}

REPORT_SCREEN: Dict[str, str] = {
    "badge": "Rationality Score",
    "quote": "“理性的人通过比较边际收益与边际成本来做出决策。” —— N. 曼昆",
    "summary": "决策逻辑总结",
    "critique": "经济学批判 (盲点分析)",
    "recommendation": "最终行动建议",
    "reset": "重置并开始新决策",
    "disclaimer": "注：本工具仅作为辅助思考工具，不构成任何投资或人生建议。",
}

def screen_for(step: WizardStep) -> Dict[str, Any]:
    if step in STEP_SCREENS:
        screen = STEP_SCREENS[step].to_dict()
        screen["badge"] = BADGE
        screen["progress_labels"] = list(PROGRESS_LABELS)
        screen["next_label"] = SUBMIT_LABEL if step == WizardStep.STEP4 else NEXT_LABEL
        screen["previous_label"] = None if step == WizardStep.STEP0 else PREVIOUS_LABEL
        return screen
    if step == WizardStep.LOADING:
        return {"title": LOADING_TITLE, "subtitle": LOADING_SUBTITLE}
    return dict(REPORT_SCREEN)
