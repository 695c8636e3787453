"""Tests for the workouts API: CRUD, lifecycle actions and ownership."""

from datetime import datetime, timedelta, timezone

import pytest

WORKOUTS = "/api/v1/workouts"


def iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


class TestCreateWorkout:
    def test_create_defaults_to_planned(self, client, alice_headers, make_workout):
        workout = make_workout()

        assert workout["status"] == "PLANNED"
        assert workout["started_at"] is None
        assert workout["is_active"] is True
        assert workout["version"] == 1
        assert workout["workout_exercises"] == []

    def test_owner_is_the_caller(self, client, alice_headers, make_workout):
        me = client.get("/api/v1/users/me", headers=alice_headers).json()

        workout = make_workout()

        assert workout["user_id"] == me["id"]

    def test_start_in_future_fails_validation(self, client, alice_headers):
        response = client.post(
            WORKOUTS,
            json={"name": "Time Travel", "started_at": iso(timedelta(hours=2))},
            headers=alice_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"]["started_at"] == "Workout session cannot start in the future"

    def test_completed_before_started_fails_validation(self, client, alice_headers):
        response = client.post(
            WORKOUTS,
            json={
                "name": "Backwards",
                "started_at": iso(timedelta(hours=-1)),
                "completed_at": iso(timedelta(hours=-2)),
            },
            headers=alice_headers,
        )

        assert response.status_code == 400
        assert "completed_at" in response.json()["errors"]

    def test_create_in_progress_stamps_start(self, client, alice_headers, make_workout):
        workout = make_workout(status="IN_PROGRESS")

        assert workout["status"] == "IN_PROGRESS"
        assert workout["started_at"] is not None

    def test_create_completed_without_start_leaves_completion_unset(
        self, client, alice_headers, make_workout
    ):
        workout = make_workout(status="COMPLETED")

        assert workout["status"] == "COMPLETED"
        assert workout["completed_at"] is None
        assert workout["actual_duration_minutes"] is None

    def test_invalid_name_is_rejected(self, client, alice_headers):
        response = client.post(WORKOUTS, json={"name": "x"}, headers=alice_headers)

        assert response.status_code == 400
        assert "name" in response.json()["errors"]


class TestWorkoutActions:
    def act(self, client, headers, workout_id, action, **extra):
        return client.post(
            f"{WORKOUTS}/{workout_id}/actions", json={"action": action, **extra}, headers=headers
        )

    def test_start_sets_in_progress_and_started_at(self, client, alice_headers, make_workout):
        workout = make_workout()

        response = self.act(client, alice_headers, workout["id"], "start")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "IN_PROGRESS"
        assert data["started_at"] is not None
        assert data["version"] == workout["version"] + 1

    def test_full_lifecycle(self, client, alice_headers, make_workout):
        workout = make_workout()

        for action, expected in [
            ("start", "IN_PROGRESS"),
            ("pause", "PAUSED"),
            ("resume", "IN_PROGRESS"),
            ("complete", "COMPLETED"),
        ]:
            response = self.act(client, alice_headers, workout["id"], action)
            assert response.status_code == 200, response.text
            assert response.json()["status"] == expected

        data = response.json()
        assert data["completed_at"] is not None
        assert data["actual_duration_minutes"] == 0

    def test_paused_workout_can_be_completed(self, client, alice_headers, make_workout):
        workout = make_workout()
        self.act(client, alice_headers, workout["id"], "start")
        self.act(client, alice_headers, workout["id"], "pause")

        response = self.act(client, alice_headers, workout["id"], "complete")

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["status"] == "COMPLETED"
        assert data["completed_at"] is not None

    def test_resume_keeps_first_start(self, client, alice_headers, make_workout):
        workout = make_workout()
        started = self.act(client, alice_headers, workout["id"], "start").json()
        self.act(client, alice_headers, workout["id"], "pause")

        resumed = self.act(client, alice_headers, workout["id"], "resume").json()

        assert resumed["started_at"] == started["started_at"]

    def test_actions_are_case_insensitive(self, client, alice_headers, make_workout):
        workout = make_workout()

        response = self.act(client, alice_headers, workout["id"], "START")

        assert response.json()["status"] == "IN_PROGRESS"

    def test_unknown_action_is_invalid_argument(self, client, alice_headers, make_workout):
        workout = make_workout()

        response = self.act(client, alice_headers, workout["id"], "teleport")

        assert response.status_code == 400
        assert "Invalid action: teleport" in response.json()["message"]
        after = client.get(f"{WORKOUTS}/{workout['id']}", headers=alice_headers).json()
        assert after["status"] == "PLANNED"
        assert after["version"] == workout["version"]

    @pytest.mark.parametrize("action", ["pause", "resume", "complete"])
    def test_disallowed_transition_names_status_and_action(
        self, client, alice_headers, make_workout, action
    ):
        workout = make_workout()

        response = self.act(client, alice_headers, workout["id"], action)

        assert response.status_code == 400
        message = response.json()["message"]
        assert "PLANNED" in message
        assert action in message

    def test_completed_is_terminal(self, client, alice_headers, make_workout):
        workout = make_workout(status="IN_PROGRESS")
        self.act(client, alice_headers, workout["id"], "complete")

        response = self.act(client, alice_headers, workout["id"], "start")

        assert response.status_code == 400
        assert "COMPLETED" in response.json()["message"]

    def test_action_with_stale_version_is_conflict(self, client, alice_headers, make_workout):
        workout = make_workout()
        self.act(client, alice_headers, workout["id"], "start")

        response = self.act(
            client, alice_headers, workout["id"], "pause", version=workout["version"]
        )

        assert response.status_code == 409

    def test_other_user_cannot_act(self, client, bob_headers, make_workout):
        workout = make_workout()

        response = self.act(client, bob_headers, workout["id"], "start")

        assert response.status_code == 403


class TestUpdateWorkout:
    def test_update_fields(self, client, alice_headers, make_workout):
        workout = make_workout()

        response = client.put(
            f"{WORKOUTS}/{workout['id']}",
            json={"version": workout["version"], "name": "Heavy Legs", "session_notes": "PR day"},
            headers=alice_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Heavy Legs"
        assert data["session_notes"] == "PR day"
        assert data["version"] == workout["version"] + 1

    def test_update_ignores_status(self, client, alice_headers, make_workout):
        workout = make_workout()

        response = client.put(
            f"{WORKOUTS}/{workout['id']}",
            json={"version": workout["version"], "status": "COMPLETED", "description": "x"},
            headers=alice_headers,
        )

        assert response.json()["status"] == "PLANNED"

    def test_update_checks_dates_against_stored_start(self, client, alice_headers, make_workout):
        workout = make_workout(started_at=iso(timedelta(hours=-1)))

        response = client.put(
            f"{WORKOUTS}/{workout['id']}",
            json={"version": workout["version"], "completed_at": iso(timedelta(hours=-3))},
            headers=alice_headers,
        )

        assert response.status_code == 400
        assert "completed_at" in response.json()["errors"]

    def test_stale_version_is_conflict(self, client, alice_headers, make_workout):
        workout = make_workout()

        response = client.put(
            f"{WORKOUTS}/{workout['id']}",
            json={"version": workout["version"] + 5, "name": "Other Name"},
            headers=alice_headers,
        )

        assert response.status_code == 409


class TestListingAndAccess:
    def test_my_workouts(self, client, alice_headers, bob_headers, make_workout):
        make_workout("Alice One")
        make_workout("Bob One", headers=bob_headers)

        response = client.get(f"{WORKOUTS}/my", headers=alice_headers)

        names = [w["name"] for w in response.json()["content"]]
        assert names == ["Alice One"]

    def test_user_workouts_for_self_and_admin(
        self, client, alice_headers, bob_headers, admin_headers, make_workout
    ):
        workout = make_workout()
        user_id = workout["user_id"]

        assert client.get(f"{WORKOUTS}/user/{user_id}", headers=alice_headers).status_code == 200
        assert client.get(f"{WORKOUTS}/user/{user_id}", headers=admin_headers).status_code == 200
        assert client.get(f"{WORKOUTS}/user/{user_id}", headers=bob_headers).status_code == 403

    def test_list_all_is_admin_only(self, client, alice_headers, admin_headers, make_workout):
        make_workout()

        assert client.get(WORKOUTS, headers=alice_headers).status_code == 403
        assert client.get(WORKOUTS, headers=admin_headers).json()["total_elements"] == 1

    def test_other_user_cannot_read(self, client, bob_headers, make_workout):
        workout = make_workout()

        response = client.get(f"{WORKOUTS}/{workout['id']}", headers=bob_headers)

        assert response.status_code == 403

    def test_missing_permission_is_forbidden(self, client, make_workout):
        from tests.conftest import make_headers

        workout = make_workout()
        headers = make_headers("auth0|alice", "alice@example.com", permissions=["read:exercises"])

        response = client.get(f"{WORKOUTS}/{workout['id']}", headers=headers)

        assert response.status_code == 403


class TestWorkoutSoftDelete:
    def test_deleted_session_hidden_but_found_including_deleted(
        self, client, alice_headers, make_workout
    ):
        workout = make_workout()
        make_workout("Still Here")

        assert client.delete(f"{WORKOUTS}/{workout['id']}", headers=alice_headers).status_code == 204

        listed = client.get(f"{WORKOUTS}/my", headers=alice_headers).json()
        assert [w["name"] for w in listed["content"]] == ["Still Here"]
        assert client.get(f"{WORKOUTS}/{workout['id']}", headers=alice_headers).status_code == 404

        found = client.get(
            f"{WORKOUTS}/{workout['id']}", params={"include_deleted": True}, headers=alice_headers
        )
        assert found.status_code == 200
        assert found.json()["is_active"] is False
        assert found.json()["deleted_at"] is not None

    def test_restore_brings_session_back(self, client, alice_headers, make_workout):
        workout = make_workout()
        client.delete(f"{WORKOUTS}/{workout['id']}", headers=alice_headers)

        response = client.post(f"{WORKOUTS}/{workout['id']}/restore", headers=alice_headers)

        assert response.status_code == 200
        assert response.json()["is_active"] is True
        listed = client.get(f"{WORKOUTS}/my", headers=alice_headers).json()
        assert listed["total_elements"] == 1

    def test_restore_active_session_is_business_error(self, client, alice_headers, make_workout):
        workout = make_workout()

        response = client.post(f"{WORKOUTS}/{workout['id']}/restore", headers=alice_headers)

        assert response.status_code == 400


class TestWorkoutExercises:
    def test_add_and_list_in_order(self, client, alice_headers, make_workout, make_exercise):
        workout = make_workout()
        squat = make_exercise("Back Squat")
        row = make_exercise("Rowing", type="CARDIO", muscle="FULL_BODY")

        client.post(
            f"{WORKOUTS}/{workout['id']}/exercises",
            json={"exercise_id": row["id"], "order_in_workout": 2},
            headers=alice_headers,
        )
        added = client.post(
            f"{WORKOUTS}/{workout['id']}/exercises",
            json={"exercise_id": squat["id"], "order_in_workout": 1},
            headers=alice_headers,
        )

        assert added.status_code == 201
        assert added.json()["exercise_name"] == "Back Squat"
        listed = client.get(f"{WORKOUTS}/{workout['id']}/exercises", headers=alice_headers).json()
        assert [we["exercise_name"] for we in listed] == ["Back Squat", "Rowing"]

        detail = client.get(f"{WORKOUTS}/{workout['id']}", headers=alice_headers).json()
        assert len(detail["workout_exercises"]) == 2

    def test_add_unknown_exercise_is_not_found(self, client, alice_headers, make_workout):
        workout = make_workout()

        response = client.post(
            f"{WORKOUTS}/{workout['id']}/exercises",
            json={"exercise_id": 999, "order_in_workout": 1},
            headers=alice_headers,
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Exercise not found with id: 999"

    def test_update_and_remove(self, client, alice_headers, make_workout, make_exercise):
        workout = make_workout()
        exercise = make_exercise()
        added = client.post(
            f"{WORKOUTS}/{workout['id']}/exercises",
            json={"exercise_id": exercise["id"], "order_in_workout": 1},
            headers=alice_headers,
        ).json()

        updated = client.put(
            f"{WORKOUTS}/exercises/{added['id']}",
            json={"version": added["version"], "notes": "Pause reps"},
            headers=alice_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["notes"] == "Pause reps"
        assert updated.json()["version"] == added["version"] + 1

        removed = client.delete(f"{WORKOUTS}/exercises/{added['id']}", headers=alice_headers)
        assert removed.status_code == 204
        listed = client.get(f"{WORKOUTS}/{workout['id']}/exercises", headers=alice_headers).json()
        assert listed == []

    def test_deleted_catalog_exercise_keeps_history(
        self, client, alice_headers, admin_headers, make_workout, make_exercise
    ):
        workout = make_workout()
        exercise = make_exercise()
        client.post(
            f"{WORKOUTS}/{workout['id']}/exercises",
            json={"exercise_id": exercise["id"], "order_in_workout": 1},
            headers=alice_headers,
        )
        client.delete(f"/api/v1/exercises/{exercise['id']}", headers=admin_headers)

        listed = client.get(f"{WORKOUTS}/{workout['id']}/exercises", headers=alice_headers).json()

        assert [we["exercise_name"] for we in listed] == ["Back Squat"]
