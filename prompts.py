from __future__ import annotations

ANALYSIS_PROMPT_TEMPLATE = """作为一名资深经济学家，请基于曼昆《经济学原理》中的“人们如何做出决策”的四大原理，对以下决策场景进行深度分析：

决策主题：{title}
场景描述：{description}
候选方案：{options}
机会成本：{opportunity_cost}
边际考量：针对"{action}"，当前的边际收益为"{marginal_benefit}"，边际成本为"{marginal_cost}"。
激励因素：{incentives}

请给出专业的评估，包括一个简短总结、对逻辑漏洞的批判、最终建议，以及一个1-100的理性决策分。
"""

# Rendering of one option inside the prompt; benefits/costs joined with "/".
OPTION_TEMPLATE = "{label}(收益:{benefits}, 成本:{costs})"
OPTION_SEPARATOR = "; "
INCENTIVE_SEPARATOR = ", "

ADVICE_SCHEMA = {
    "type": "object",
    "properties": {
        "summary": {"type": "string", "description": "决策逻辑总结"},
        "critique": {"type": "string", "description": "基于经济学原理的逻辑漏洞分析"},
        "recommendation": {"type": "string", "description": "最终行动建议"},
        "score": {"type": "number", "description": "理性程度评分 (0-100)"},
    },
    "required": ["summary", "critique", "recommendation", "score"],
    "additionalProperties": False,
}

# OpenRouter structured-output request (OpenAI-compatible response_format).
ADVICE_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "decision_advice",
        "strict": True,
        "schema": ADVICE_SCHEMA,
    },
}
