"""End-to-end tests for the HTTP endpoints."""

import pytest


@pytest.fixture
def configured(client, scenario_setup):
    response = client.put("/api/setup", json=scenario_setup)
    assert response.status_code == 200
    return client


class TestHealthEndpoints:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_config(self, client):
        body = client.get("/api/config").json()
        assert body["history_limit"] == 30
        assert body["dedup_window_seconds"] == 60


class TestSetupEndpoints:
    def test_default_setup_is_zero(self, client):
        body = client.get("/api/setup").json()
        assert body == {
            "sprint_days": 0,
            "team_members": 0,
            "leave_days": 0,
            "committed_sp": 0,
            "v1": 0,
            "v2": 0,
            "v3": 0,
        }

    def test_put_coerces_loose_values(self, client):
        body = client.put(
            "/api/setup", json={"sprintDays": "10", "teamMembers": 5, "leaveDays": -3, "committedSP": "abc"}
        ).json()
        assert body["sprint_days"] == 10
        assert body["team_members"] == 5
        assert body["leave_days"] == 0
        assert body["committed_sp"] == 0
        assert client.get("/api/setup").json() == body

    def test_patch_merges(self, configured):
        body = configured.patch("/api/setup", json={"committedSP": 60}).json()
        assert body["committed_sp"] == 60
        assert body["v1"] == 40


class TestSignalEndpoints:
    def test_signals_for_stored_setup(self, configured):
        body = configured.get("/api/signals").json()
        assert body["risk_score"] == 22
        assert body["risk_band"] == "Low"
        assert body["confidence"] == 75
        assert body["capacity_health"] == "Critical"
        assert body["components"]["cap"] == pytest.approx(11.728, abs=1e-3)

    def test_empty_setup_signals(self, client):
        body = client.get("/api/signals").json()
        assert body["risk_score"] == 0
        assert body["capacity_health"] is None

    def test_post_does_not_persist(self, client):
        body = client.post(
            "/api/signals",
            json={"sprintDays": 10, "teamMembers": 5, "leaveDays": 5, "committedSP": 50, "v1": 40, "v2": 45, "v3": 50},
        ).json()
        assert body["risk_score"] == 22
        assert client.get("/api/setup").json()["committed_sp"] == 0

    def test_overflowing_inputs_stay_numeric(self, client):
        body = client.post(
            "/api/signals",
            json={"sprint_days": 1e200, "team_members": 1e200, "committed_sp": 50, "v1": 1e308, "v2": 1},
        ).json()
        for name in ("avg_velocity", "vol", "ideal_person_days", "capacity_sp", "overcommit_ratio"):
            assert isinstance(body[name], (int, float)), name
        assert body["capacity_sp"] == 0
        assert body["confidence"] == 0
        assert body["capacity_health"] is None
        assert 0 <= body["risk_score"] <= 100

    def test_recommendation(self, configured):
        body = configured.get("/api/signals/recommendation").json()
        assert body["recommended"] == "planning"
        assert body["brief"]["checklist"][0].startswith("High Scope Pressure")

    def test_suggestions_without_setup(self, client):
        body = client.get("/api/signals/suggestions").json()
        assert [card["title"] for card in body] == ["Setup Required"]

    def test_drivers(self, configured):
        body = configured.get("/api/signals/drivers").json()
        assert [d["title"] for d in body] == ["Capacity Shortfall", "Scope Pressure", "Predictability"]


class TestHistoryEndpoints:
    def test_empty_history(self, client):
        body = client.get("/api/history").json()
        assert body["snapshots"] == []
        assert body["sprint_id"].startswith("SPRINT_")
        assert client.get("/api/history/last").json() is None

    def test_save_dedup_and_force(self, configured):
        first = configured.post("/api/history/snapshots").json()
        assert first["ok"] is True
        assert first["snapshot"]["mode"] == "stable"

        second = configured.post("/api/history/snapshots").json()
        assert second == {"ok": False, "reason": "duplicate", "snapshot": first["snapshot"]}

        forced = configured.post("/api/history/snapshots", params={"force": "true"}).json()
        assert forced["ok"] is True

        snapshots = configured.get("/api/history").json()["snapshots"]
        assert len(snapshots) == 2
        assert configured.get("/api/history/last").json() == forced["snapshot"]
        assert configured.get("/api/history/trend/risk_score").json() == {"metric": "risk_score", "trend": "flat"}

    def test_trend_reflects_setup_change(self, configured):
        configured.post("/api/history/snapshots")
        configured.patch("/api/setup", json={"committed_sp": 80})
        configured.post("/api/history/snapshots", params={"force": True})
        assert configured.get("/api/history/trend/risk_score").json()["trend"] == "up"

    def test_clear_keeps_sprint(self, configured):
        sprint_id = configured.get("/api/history/sprint").json()["sprint_id"]
        configured.post("/api/history/snapshots")

        response = configured.delete("/api/history")
        assert response.status_code == 204
        assert configured.get("/api/history").json()["snapshots"] == []
        assert configured.get("/api/history/sprint").json()["sprint_id"] == sprint_id

    def test_reset_sprint(self, client):
        body = client.post("/api/history/sprint/reset").json()
        assert body["sprint_id"].startswith("SPRINT_")
        assert client.get("/api/history/sprint").json() == body

    def test_summary(self, configured):
        assert configured.get("/api/history/summary").json()["snapshot_count"] == 0
        configured.post("/api/history/snapshots")
        body = configured.get("/api/history/summary").json()
        assert body["snapshot_count"] == 1
        assert body["overcommit_streak"] == 1
        assert body["stability"]["label"] in {"Stable", "Watch", "Fragile"}


class TestForecastEndpoints:
    def test_team(self, client):
        body = client.post(
            "/api/forecast/team",
            json={"sprint_days": 10, "team_members": 5, "leave_days": 5, "interrupt_pct": 10, "velocities": [40, 45, 50]},
        ).json()
        assert body["forecast_sp"] == pytest.approx(36.45)

    def test_roles(self, client):
        body = client.post(
            "/api/forecast/roles",
            json={
                "total_days": 10,
                "sp_per_day": 1,
                "unavailable_weight": 0.5,
                "roles": [{"name": "Dev", "members": 3, "unavailable": 2}, {"name": "QA", "members": 1}],
            },
        ).json()
        assert body["total_sp"] == 37
        assert [r["name"] for r in body["roles"]] == ["Dev", "QA"]


class TestXpEndpoints:
    def test_initial_status(self, client):
        body = client.get("/api/xp").json()
        assert body["state"]["total_xp"] == 0
        assert body["level"] == {"level": 1, "in_level": 0, "next": 300, "title": "Rookie"}

    def test_award_once_per_day(self, configured):
        first = configured.post("/api/xp/award").json()
        assert first["gained"] == 30
        assert first["state"]["streak"] == 0

        second = configured.post("/api/xp/award").json()
        assert second["gained"] == 0
        assert second["reasons"] == []
        assert configured.get("/api/xp").json()["state"]["total_xp"] == 30


class TestNotesEndpoints:
    def test_save_get_clear(self, client):
        saved = client.put("/api/notes/planning", json={"finalCommit": 40, "riskAcceptance": "Low"}).json()
        assert saved["notes"] == {"final_commit": "40", "risk_acceptance": "Low"}
        assert client.get("/api/notes/planning").json() == saved

        assert client.delete("/api/notes/planning").status_code == 204
        assert client.get("/api/notes/planning").json()["notes"] == {}

    def test_list(self, client):
        body = client.get("/api/notes").json()
        assert [n["ceremony"] for n in body] == ["planning", "daily", "refine", "review", "retro"]

    def test_unknown_ceremony(self, client):
        assert client.get("/api/notes/standup").status_code == 422
