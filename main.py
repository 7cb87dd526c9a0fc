from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Dict, Any, List

import requests
from dotenv import load_dotenv
load_dotenv()

from screens import APP_NAME, APP_TAGLINE

# -----------------------------
# Config defaults
# -----------------------------
DEFAULT_BASE_URL = os.getenv("ECONODECIDE_BASE_URL", "http://127.0.0.1:8000")

# -----------------------------
# Simple HTTP client helpers
# -----------------------------
def _request(method: str, base_url: str, path: str, payload: Dict[str, Any] | None = None) -> Dict[str, Any]:
    url = f"{base_url.rstrip('/')}{path}"
    r = requests.request(method, url, json=payload, timeout=120)
    if r.status_code >= 400:
        print(f"\n[CLIENT] HTTP {r.status_code} from {url}")
        try:
            print("[CLIENT] Body:", r.json())
        except ValueError:
            print("[CLIENT] Body:", r.text[:1000])
        r.raise_for_status()
    return r.json()

# -----------------------------
# API wrappers
# -----------------------------
def get_state(base_url: str) -> Dict[str, Any]:
    return _request("GET", base_url, "/v1/wizard")

def navigate(base_url: str, action: str) -> Dict[str, Any]:
    return _request("POST", base_url, f"/v1/wizard/{action}")

def patch_decision(base_url: str, **fields: str) -> Dict[str, Any]:
    return _request("PATCH", base_url, "/v1/decision", fields)

def add_option(base_url: str) -> Dict[str, Any]:
    return _request("POST", base_url, "/v1/decision/options")

def patch_option(base_url: str, option_id: str, **fields: Any) -> Dict[str, Any]:
    return _request("PATCH", base_url, f"/v1/decision/options/{option_id}", fields)

def patch_marginal(base_url: str, **fields: Any) -> Dict[str, Any]:
    return _request("PATCH", base_url, "/v1/decision/marginal", fields)

def add_incentive(base_url: str) -> Dict[str, Any]:
    return _request("POST", base_url, "/v1/decision/incentives")

def set_incentive(base_url: str, index: int, value: str) -> Dict[str, Any]:
    return _request("PUT", base_url, f"/v1/decision/incentives/{index}", {"value": value})

def get_report(base_url: str) -> Dict[str, Any]:
    return _request("GET", base_url, "/v1/wizard/report")

# -----------------------------
# Pretty printers
# -----------------------------
def print_screen(state: Dict[str, Any]) -> None:
    screen = state["screen"]
    if state.get("progress") is not None:
        filled = int(state["progress"] // 5)
        labels = screen.get("progress_labels") or []
        current = labels[int(state["progress"] // 25)] if labels else ""
        print(f"\n[{'#' * filled}{'.' * (20 - filled)}] {state['progress']:.0f}% {current}")
    print(f"\n===== {screen['title']} =====")
    if screen.get("principle"):
        print(f"{screen.get('badge', '')} · {screen['principle']}")
    if screen.get("subtitle"):
        print(screen["subtitle"])
    if screen.get("tip"):
        print(f"提示：{screen['tip']}")
    if state.get("notice"):
        print(f"\n⚠️  {state['notice']}")

def print_report(report: Dict[str, Any], screen: Dict[str, Any]) -> None:
    print(f"\n===== {screen['badge']}: {report['score']} =====")
    print(report["title"])
    print(screen["quote"])
    print(f"\n--- {screen['summary']} ---\n{report['summary']}")
    print(f"\n--- {screen['critique']} ---\n{report['critique']}")
    print(f"\n--- {screen['recommendation']} ---\n{report['recommendation']}")
    print(f"\n{screen['disclaimer']}")
    print("=" * 32)

def _split_items(text: str) -> List[str]:
    # One line in the terminal; "/" separates entries, matching the prompt rendering.
    return [part.strip() for part in text.split("/")]

# -----------------------------
# Fill steps
# -----------------------------
def fill_step(base_url: str, state: Dict[str, Any], answers: Dict[str, Any] | None) -> Dict[str, Any]:
    """Fill the current input step, from `answers` when given, otherwise by prompting."""
    step = state["step"]
    ask = (lambda key, label: answers.get(key, "")) if answers is not None else (lambda key, label: input(f"{label}: ").strip())

    if step == "step0":
        return patch_decision(base_url, title=ask("title", "决策主题"), description=ask("description", "详细描述"))

    if step == "step1":
        options = answers.get("options", []) if answers is not None else None
        idx = 0
        while True:
            current = state["decision"]["options"]
            if idx >= len(current):
                current.append(add_option(base_url))
            opt_id = current[idx]["id"]
            if options is not None:
                o = options[idx]
                label, benefits, costs = o["label"], o["benefits"], o["costs"]
            else:
                label = input(f"方案 {idx + 1} 名称: ").strip()
                benefits = _split_items(input("潜在收益 (用 / 分隔): "))
                costs = _split_items(input("潜在代价 (用 / 分隔): "))
            state = patch_option(base_url, opt_id, label=label, benefits=benefits, costs=costs)
            idx += 1
            more = idx < len(options) if options is not None else input("+ 添加候选方案? [y/N]: ").strip().lower() == "y"
            if not more:
                return state

    if step == "step2":
        return patch_decision(base_url, opportunity_cost=ask("opportunity_cost", "机会成本"))

    if step == "step3":
        return patch_marginal(
            base_url,
            action=ask("action", "分析的具体动作"),
            marginal_benefit=ask("marginal_benefit", "边际收益 (MB)"),
            marginal_cost=ask("marginal_cost", "边际成本 (MC)"),
        )

    if step == "step4":
        incentives = answers.get("incentives", [""]) if answers is not None else None
        idx = 0
        while True:
            if idx >= len(state["decision"]["incentives"]):
                state = add_incentive(base_url)
            value = incentives[idx] if incentives is not None else input(f"激励因素 {idx + 1}: ").strip()
            state = set_incentive(base_url, idx, value)
            idx += 1
            more = idx < len(incentives) if incentives is not None else input("+ 添加更多影响因素? [y/N]: ").strip().lower() == "y"
            if not more:
                return state

    return state

# -----------------------------
# Play loop
# -----------------------------
def play(base_url: str, answers: Dict[str, Any] | None = None) -> None:
    print(f"{APP_NAME}: {APP_TAGLINE}")
    state = get_state(base_url)
    if state["step"] == "report":
        state = navigate(base_url, "reset")

    while state["step"] != "report":
        print_screen(state)
        state = fill_step(base_url, state, answers)
        if answers is None and state["step"] != "step0":
            if input(f"{state['screen']['previous_label']}? [y/N]: ").strip().lower() == "y":
                state = navigate(base_url, "previous")
                continue
        if state["step"] == "step4":
            print(f"\n{state['screen']['next_label']}")
        state = navigate(base_url, "next")
        if state.get("notice"):
            # Back on the last input step with everything kept.
            print(f"\n⚠️  {state['notice']}")
            if answers is not None or input("重试? [y/N]: ").strip().lower() != "y":
                return

    print_report(get_report(base_url), state["screen"])

DEMO_ANSWERS: Dict[str, Any] = {
    "title": "是否读MBA",
    "description": "工作五年，想转型做管理",
    "options": [
        {"label": "读书", "benefits": ["涨薪"], "costs": ["学费"]},
        {"label": "继续工作", "benefits": ["稳定收入"], "costs": ["成长放缓"]},
    ],
    "opportunity_cost": "放弃工作两年",
    "action": "多学一年",
    "marginal_benefit": "更高起薪",
    "marginal_cost": "机会成本上升",
    "incentives": ["父母期望"],
}

# -----------------------------
# Run server (programmatically)
# -----------------------------
def run_server(port: int, host: str = "127.0.0.1", reload: bool = True) -> None:
    import uvicorn
    uvicorn.run("api:app", host=host, port=port, reload=reload)

# -----------------------------
# Health checker
# -----------------------------
def health_check(base_url: str) -> None:
    print(f"🔎 Checking server at {base_url} ...")
    try:
        r = requests.get(f"{base_url.rstrip('/')}/docs", timeout=10)
        r.raise_for_status()
        print("✅ /docs reachable")

        state = get_state(base_url)
        print(f"✅ JSON API ok (step={state['step']})")
    except requests.RequestException as e:
        print(f"❌ Health check failed: {e}")
        sys.exit(1)

# -----------------------------
# CLI
# -----------------------------
def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="EconoDecide: decision wizard server + client in one file")

    sub = p.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("serve", help="Start the FastAPI server (uvicorn)")
    ps.add_argument("--port", type=int, default=8000, help="Port to bind")
    ps.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind")
    ps.add_argument("--no-reload", action="store_true", help="Disable auto-reload")

    pp = sub.add_parser("play", help="Walk through the decision wizard (interactive or auto)")
    pp.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="API base URL")
    pp.add_argument("--auto-demo", action="store_true", help="Submit a canned MBA scenario instead of prompting")

    ph = sub.add_parser("health", help="Check server availability")
    ph.add_argument("--base-url", type=str, default=DEFAULT_BASE_URL, help="API base URL")

    return p.parse_args()

def main() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = parse_args()

    if args.cmd == "serve":
        run_server(port=args.port, host=args.host, reload=(not args.no_reload))
        return

    if args.cmd == "play":
        try:
            requests.get(f"{args.base_url.rstrip('/')}/docs", timeout=5).raise_for_status()
        except requests.RequestException:
            print("⚠️  Could not reach the server. Is it running?\n"
                  "    Start it in another terminal:\n"
                  "    python main.py serve")
            sys.exit(1)

        play(args.base_url, DEMO_ANSWERS if args.auto_demo else None)
        return

    if args.cmd == "health":
        health_check(args.base_url)
        return

    print("Unknown command. Try: python main.py --help")
    sys.exit(2)

if __name__ == "__main__":
    main()
