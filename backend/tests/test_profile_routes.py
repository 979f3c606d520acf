"""
Mounjaro Tracker Backend — Onboarding & Profile Endpoint Tests
================================================================

What we test:
    ✅ Completing onboarding creates the profile and points at /summary
    ✅ Completing it twice → 409
    ✅ Goal weight must be below starting weight (422)
    ✅ GET/PUT /api/profile, including 404 before onboarding
    ✅ PUT refuses null for required columns but may clear the injection day
    ✅ PUT keeps goal below start against the stored values (400)
    ✅ All of it requires a session (401)
"""

import pytest


class TestCompleteOnboarding:

    @pytest.mark.asyncio
    async def test_complete_onboarding(self, test_client, registered_user, auth_headers, profile_data):
        response = await test_client.post(
            "/api/onboarding/complete", json=profile_data, headers=auth_headers
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["redirect_to"] == "/summary"
        assert body["profile"]["age"] == 42
        assert body["profile"]["starting_weight_kg"] == pytest.approx(95.4)

    @pytest.mark.asyncio
    async def test_complete_twice(self, test_client, onboarded_user, auth_headers, profile_data):
        response = await test_client.post(
            "/api/onboarding/complete", json=profile_data, headers=auth_headers
        )
        assert response.status_code == 409
        assert response.json()["message"] == "Profile already exists. Onboarding already completed."

    @pytest.mark.asyncio
    async def test_goal_must_be_below_start(self, test_client, registered_user, auth_headers, profile_data):
        profile_data["goal_weight_kg"] = profile_data["starting_weight_kg"] + 1
        response = await test_client.post(
            "/api/onboarding/complete", json=profile_data, headers=auth_headers
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_requires_session(self, test_client, profile_data):
        response = await test_client.post("/api/onboarding/complete", json=profile_data)
        assert response.status_code == 401


class TestProfile:

    @pytest.mark.asyncio
    async def test_get_before_onboarding(self, test_client, registered_user, auth_headers):
        response = await test_client.get("/api/profile", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Profile not found"

    @pytest.mark.asyncio
    async def test_get_profile(self, test_client, onboarded_user, auth_headers):
        response = await test_client.get("/api/profile", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["gender"] == "female"
        assert response.json()["treatment_start_date"] == "2024-01-08"

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, onboarded_user, auth_headers):
        response = await test_client.put(
            "/api/profile", json={"goal_weight_kg": 70.5}, headers=auth_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["goal_weight_kg"] == pytest.approx(70.5)
        assert body["age"] == 42

    @pytest.mark.asyncio
    async def test_get_requires_session(self, test_client):
        response = await test_client.get("/api/profile")
        assert response.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field", ["age", "gender", "height_cm", "goal_weight_kg", "treatment_start_date", "reminder_days_before"]
    )
    async def test_update_rejects_null(self, test_client, onboarded_user, auth_headers, field):
        response = await test_client.put("/api/profile", json={field: None}, headers=auth_headers)
        assert response.status_code == 422

        unchanged = await test_client.get("/api/profile", headers=auth_headers)
        assert unchanged.json()[field] is not None

    @pytest.mark.asyncio
    async def test_update_clears_injection_day(self, test_client, onboarded_user, auth_headers):
        response = await test_client.put(
            "/api/profile", json={"preferred_injection_day": None}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["preferred_injection_day"] is None

    @pytest.mark.asyncio
    async def test_update_goal_not_below_stored_start(self, test_client, onboarded_user, auth_headers):
        # Stored starting weight is 95.4
        response = await test_client.put(
            "/api/profile", json={"goal_weight_kg": 99}, headers=auth_headers
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Goal weight must be less than your starting weight"
        assert body["details"]["field"] == "goal_weight_kg"

        unchanged = await test_client.get("/api/profile", headers=auth_headers)
        assert unchanged.json()["goal_weight_kg"] == pytest.approx(75.0)

    @pytest.mark.asyncio
    async def test_update_start_below_stored_goal(self, test_client, onboarded_user, auth_headers):
        # Stored goal weight is 75.0
        response = await test_client.put(
            "/api/profile", json={"starting_weight_kg": 70}, headers=auth_headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_both_weights_together(self, test_client, onboarded_user, auth_headers):
        response = await test_client.put(
            "/api/profile",
            json={"starting_weight_kg": 110, "goal_weight_kg": 99},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["goal_weight_kg"] == pytest.approx(99.0)
