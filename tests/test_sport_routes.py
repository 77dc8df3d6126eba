"""HTTP tests for the /programs/sport endpoints."""

import random

from livora_api.errors import AIWorkoutServiceError, ConcurrentModificationError
from livora_api.workouts.generator import generate_workout_plan


def _create(client, **body):
    return client.post("/programs/sport", json=body)


class TestGetProgram:
    def test_404_without_active_program(self, client):
        response = client.get("/programs/sport")
        assert response.status_code == 404
        assert response.json()["detail"] == "No active sport program found"

    def test_returns_active_program(self, client):
        created = _create(client).json()["data"]

        response = client.get("/programs/sport")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"] == created["id"]


class TestCreateProgram:
    def test_201_on_creation(self, client):
        response = _create(client, level="debutant", goal="perte_poids", daysPerWeek=3)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["level"] == "debutant"
        assert data["goal"] == "perte_poids"
        assert data["days_per_week"] == 3
        assert data["active"] is True
        assert data["exercises"]
        assert {"day", "order", "completed", "day_title"} <= set(data["exercises"][0])

    def test_200_when_program_exists(self, client):
        first = _create(client).json()["data"]

        response = _create(client, goal="endurance")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == first["id"]

    def test_regenerate(self, client):
        first = _create(client).json()["data"]

        response = _create(client, regenerate=True)

        assert response.status_code == 201
        assert response.json()["data"]["id"] != first["id"]

    def test_garbage_profile_is_coerced(self, client):
        response = _create(client, level=12, goal=["x"], daysPerWeek="lots")

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["level"] == "beginner"
        assert data["goal"] == "general"
        assert data["days_per_week"] == 3

    def test_use_ai_flag(self, client, ai_service):
        ai_service.generate_ai_workout_plan.return_value = (
            generate_workout_plan({}, rng=random.Random(1)),
            True,
        )

        response = _create(client, useAI=True)

        assert response.status_code == 201
        assert response.json()["data"]["created_by"] == "ai"

    def test_conflict_maps_to_409(self, client, sport_service, monkeypatch):
        def lose_race(*args, **kwargs):
            raise ConcurrentModificationError("Another program was created at the same time. Please retry.")

        monkeypatch.setattr(sport_service, "create_program", lose_race)

        response = _create(client, regenerate=True)
        assert response.status_code == 409

    def test_unknown_user_is_404(self, client, user_repo):
        user_repo.rows.clear()
        response = _create(client)
        assert response.status_code == 404


class TestUpdateExercises:
    def test_replaces_exercises(self, client):
        program = _create(client).json()["data"]
        kept = program["exercises"][:1]

        response = client.put("/programs/sport", json={"exercises": kept})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_customized"] is True
        assert [e["id"] for e in data["exercises"]] == [kept[0]["id"]]

    def test_validates_exercises(self, client):
        _create(client)
        response = client.put("/programs/sport", json={"exercises": [{"name": "X", "sets": 0}]})
        assert response.status_code == 422


class TestExerciseStatus:
    def test_completes_exercise(self, client):
        exercise_id = _create(client).json()["data"]["exercises"][0]["id"]

        response = client.put(f"/programs/sport/exercise/{exercise_id}", json={"completed": True})

        assert response.status_code == 200
        exercises = response.json()["data"]["exercises"]
        assert next(e for e in exercises if e["id"] == exercise_id)["completed"] is True

        tracks = client.get("/programs/sport/tracks").json()["data"]
        assert len(tracks) == 1
        assert tracks[0]["exercise_id"] == exercise_id

    def test_completed_is_required(self, client):
        exercise_id = _create(client).json()["data"]["exercises"][0]["id"]
        response = client.put(f"/programs/sport/exercise/{exercise_id}", json={})
        assert response.status_code == 422

    def test_unknown_exercise(self, client):
        _create(client)
        response = client.put("/programs/sport/exercise/nope", json={"completed": True})
        assert response.status_code == 404


class TestTrackWorkout:
    def test_tracks_exercise(self, client):
        exercise_id = _create(client).json()["data"]["exercises"][0]["id"]

        response = client.post(
            "/programs/sport/track",
            json={"exerciseId": exercise_id, "actualSets": 3, "actualReps": 10, "notes": "ok"},
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["exercise_id"] == exercise_id
        assert data["completed"] is True
        assert data["actual_sets"] == 3

    def test_exercise_id_required(self, client):
        _create(client)
        response = client.post("/programs/sport/track", json={"actualSets": 3})
        assert response.status_code == 422

    def test_without_program(self, client):
        response = client.post("/programs/sport/track", json={"exerciseId": "abc"})
        assert response.status_code == 404


class TestHistory:
    def test_lists_programs(self, client):
        _create(client)
        _create(client, regenerate=True)

        response = client.get("/programs/sport/history")

        assert response.status_code == 200
        programs = response.json()["data"]
        assert len(programs) == 2
        assert [p["active"] for p in programs] == [True, False]

    def test_only_active(self, client):
        _create(client)
        _create(client, regenerate=True)

        programs = client.get("/programs/sport/history", params={"only_active": True}).json()["data"]
        assert len(programs) == 1

    def test_limit_bounds(self, client):
        assert client.get("/programs/sport/history", params={"limit": 0}).status_code == 422
        assert client.get("/programs/sport/history", params={"limit": 51}).status_code == 422
        assert client.get("/programs/sport/history", params={"offset": -1}).status_code == 422


class TestOptimize:
    def test_optimizes_active_program(self, client, ai_service):
        original = _create(client).json()["data"]
        ai_service.enhance_workout_plan.return_value = generate_workout_plan({})

        response = client.post("/programs/sport/optimize", json={})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["optimized"] is True
        assert data["based_on"] == original["id"]

    def test_ai_failure_is_502(self, client, ai_service):
        _create(client)
        ai_service.enhance_workout_plan.side_effect = AIWorkoutServiceError("AI optimization failed")

        response = client.post("/programs/sport/optimize", json={})

        assert response.status_code == 502
        assert client.get("/programs/sport/history").json()["data"][0]["optimized"] is False

    def test_unknown_program_id(self, client):
        _create(client)
        response = client.post("/programs/sport/optimize", json={"programId": "missing"})
        assert response.status_code == 404


class TestAuthRequired:
    def test_missing_credentials(self, anonymous_client):
        response = anonymous_client.get("/programs/sport")
        assert response.status_code == 401
