import pytest
from fastapi.testclient import TestClient

from api import create_app
from screens import FAILURE_NOTICE

@pytest.fixture
def client(dummy_client):
    return TestClient(create_app(client=dummy_client))

def _advance(client, times):
    for _ in range(times):
        resp = client.post("/v1/wizard/next")
        assert resp.status_code == 200
    return resp.json()

def test_initial_state(client):
    resp = client.get("/v1/wizard")
    assert resp.status_code == 200
    data = resp.json()
    assert data["step"] == "step0"
    assert data["progress"] == 0.0
    assert data["screen"]["title"] == "你想解决什么问题？"
    assert data["decision"]["options"] == [{"id": "1", "label": "", "benefits": [""], "costs": [""]}]
    assert data["advice"] is None

def test_full_flow_to_report_and_reset(client, advice_payload):
    client.patch("/v1/decision", json={"title": "是否读MBA", "description": "工作五年"})
    _advance(client, 1)
    opt = client.post("/v1/decision/options").json()
    assert opt["id"] != "1"
    resp = client.patch(f"/v1/decision/options/{opt['id']}", json={"label": "继续工作", "benefits": ["稳定"]})
    assert resp.json()["decision"]["options"][1]["label"] == "继续工作"
    _advance(client, 2)
    client.patch("/v1/decision/marginal", json={"action": "多学一年", "marginal_cost": "机会成本上升"})
    data = _advance(client, 1)
    assert data["step"] == "step4"
    assert data["screen"]["next_label"] == "生成分析报告 →"
    client.post("/v1/decision/incentives")
    client.put("/v1/decision/incentives/1", json={"value": "父母期望"})

    data = _advance(client, 1)
    assert data["step"] == "report"
    assert data["advice"] == {**advice_payload, "score": 72.0}

    report = client.get("/v1/wizard/report").json()
    assert report["title"] == "是否读MBA"
    for key in ("summary", "critique", "recommendation", "score"):
        assert report[key] == advice_payload[key]

    data = client.post("/v1/wizard/reset").json()
    assert data["step"] == "step0"
    assert data["decision"]["title"] == ""
    assert data["decision"]["incentives"] == [""]
    assert data["advice"] is None

def test_failure_surfaces_notice(make_client):
    client = TestClient(create_app(client=make_client(reply="oops")))
    client.patch("/v1/decision", json={"title": "是否读MBA"})
    data = _advance(client, 5)
    assert data["step"] == "step4"
    assert data["notice"] == FAILURE_NOTICE
    assert data["decision"]["title"] == "是否读MBA"

def test_invalid_transitions_conflict(client):
    assert client.post("/v1/wizard/previous").status_code == 409
    assert client.post("/v1/wizard/reset").status_code == 409
    assert client.get("/v1/wizard/report").status_code == 409
    assert client.patch("/v1/decision/options/nope", json={"label": "x"}).status_code == 409
    assert client.put("/v1/decision/incentives/3", json={"value": "x"}).status_code == 409

def test_edits_locked_on_report(client):
    _advance(client, 5)
    assert client.patch("/v1/decision", json={"title": "x"}).status_code == 409

def test_server_recovers_after_unexpected_transport_error(make_client):
    llm = make_client(error=OSError("Could not find a suitable TLS CA certificate bundle"))
    client = TestClient(create_app(client=llm))
    data = _advance(client, 5)
    assert data["step"] == "step4"
    assert data["notice"] == FAILURE_NOTICE
    llm.error = None
    data = _advance(client, 1)
    assert data["step"] == "report"
    assert client.post("/v1/wizard/reset").status_code == 200
