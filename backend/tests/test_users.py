"""Tests for the users API and user synchronisation from tokens."""

from tests.conftest import make_headers

USERS = "/api/v1/users"


def new_user(**overrides):
    body = {
        "username": "alice",
        "email": "a@x.com",
        "first_name": "Alice",
        "last_name": "Lifter",
    }
    body.update(overrides)
    return body


class TestCreateUser:
    def test_create_user(self, client, admin_headers):
        response = client.post(USERS, json=new_user(), headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "alice"
        assert data["role"] == "USER"
        assert data["is_active"] is True
        assert data["version"] == 1

    def test_duplicate_username_is_conflict(self, client, admin_headers):
        client.post(USERS, json=new_user(), headers=admin_headers)

        response = client.post(USERS, json=new_user(email="other@x.com"), headers=admin_headers)

        assert response.status_code == 409
        assert "username" in response.json()["message"]

    def test_duplicate_email_is_conflict(self, client, admin_headers):
        client.post(USERS, json=new_user(), headers=admin_headers)

        response = client.post(USERS, json=new_user(username="alice2"), headers=admin_headers)

        assert response.status_code == 409
        assert "email" in response.json()["message"]

    def test_invalid_username_reports_field(self, client, admin_headers):
        response = client.post(USERS, json=new_user(username="not valid!"), headers=admin_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert "username" in body["errors"]

    def test_requires_write_permission(self, client, alice_headers):
        response = client.post(USERS, json=new_user(username="eve"), headers=alice_headers)

        assert response.status_code == 403


class TestCurrentUser:
    def test_first_request_provisions_user(self, client, alice_headers):
        response = client.get(f"{USERS}/me", headers=alice_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "alice"
        assert data["email"] == "alice@example.com"
        assert data["auth_subject"] == "auth0|alice"

    def test_email_change_in_token_is_synchronised(self, client):
        client.get(f"{USERS}/me", headers=make_headers("auth0|carol", "carol@example.com"))

        response = client.get(
            f"{USERS}/me", headers=make_headers("auth0|carol", "carol@new.example.com")
        )

        assert response.json()["email"] == "carol@new.example.com"

    def test_username_collision_gets_suffix(self, client):
        client.get(f"{USERS}/me", headers=make_headers("auth0|a1", "x1@example.com", nickname="sam"))

        response = client.get(
            f"{USERS}/me", headers=make_headers("auth0|a2", "x2@example.com", nickname="sam")
        )

        assert response.json()["username"] == "sam1"

    def test_missing_token_is_unauthorized(self, client):
        response = client.get(f"{USERS}/me")

        assert response.status_code == 401
        assert response.json()["status"] == 401

    def test_garbage_token_is_unauthorized(self, client):
        response = client.get(f"{USERS}/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_deleted_user_is_forbidden(self, client, alice_headers):
        me = client.get(f"{USERS}/me", headers=alice_headers).json()
        client.delete(f"{USERS}/{me['id']}", headers=alice_headers)

        response = client.get(f"{USERS}/me", headers=alice_headers)

        assert response.status_code == 403


class TestUserQueries:
    def test_get_own_profile(self, client, alice_headers):
        me = client.get(f"{USERS}/me", headers=alice_headers).json()

        response = client.get(f"{USERS}/{me['id']}", headers=alice_headers)

        assert response.status_code == 200
        assert response.json()["id"] == me["id"]

    def test_other_profile_is_forbidden(self, client, alice_headers, bob_headers):
        bob = client.get(f"{USERS}/me", headers=bob_headers).json()

        response = client.get(f"{USERS}/{bob['id']}", headers=alice_headers)

        assert response.status_code == 403

    def test_admin_reads_any_profile(self, client, alice_headers, admin_headers):
        alice = client.get(f"{USERS}/me", headers=alice_headers).json()

        response = client.get(f"{USERS}/{alice['id']}", headers=admin_headers)

        assert response.status_code == 200

    def test_unknown_user_is_not_found(self, client, admin_headers):
        response = client.get(f"{USERS}/9999", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "User not found with id: 9999"

    def test_list_users_is_paged(self, client, admin_headers):
        for i in range(3):
            client.post(
                USERS,
                json=new_user(username=f"user{i}", email=f"u{i}@x.com"),
                headers=admin_headers,
            )

        response = client.get(USERS, params={"page": 0, "size": 2}, headers=admin_headers)

        data = response.json()
        # three created users plus the admin provisioned from the token
        assert data["total_elements"] == 4
        assert data["total_pages"] == 2
        assert len(data["content"]) == 2
        assert data["first"] is True
        assert data["last"] is False

    def test_search_by_first_name(self, client, admin_headers):
        client.post(USERS, json=new_user(), headers=admin_headers)
        client.post(
            USERS,
            json=new_user(username="bobby", email="b@x.com", first_name="Bob"),
            headers=admin_headers,
        )

        response = client.get(f"{USERS}/search", params={"first_name": "ali"}, headers=admin_headers)

        names = [u["username"] for u in response.json()["content"]]
        assert names == ["alice"]

    def test_search_treats_wildcards_literally(self, client, admin_headers):
        client.post(USERS, json=new_user(), headers=admin_headers)

        response = client.get(f"{USERS}/search", params={"first_name": "%"}, headers=admin_headers)

        assert response.json()["total_elements"] == 0

    def test_existence_checks_are_public(self, client, admin_headers):
        client.post(USERS, json=new_user(), headers=admin_headers)

        taken = client.get(f"{USERS}/check-username", params={"username": "alice"})
        free = client.get(f"{USERS}/check-email", params={"email": "free@x.com"})

        assert taken.json() == {"exists": True}
        assert free.json() == {"exists": False}


class TestUpdateAndDeleteUser:
    def test_update_increments_version(self, client, alice_headers):
        me = client.get(f"{USERS}/me", headers=alice_headers).json()

        response = client.put(
            f"{USERS}/{me['id']}",
            json={"version": me["version"], "first_name": "Alicia"},
            headers=alice_headers,
        )

        assert response.status_code == 200
        assert response.json()["first_name"] == "Alicia"
        assert response.json()["version"] == me["version"] + 1

    def test_update_with_stale_version_is_conflict(self, client, alice_headers):
        me = client.get(f"{USERS}/me", headers=alice_headers).json()
        client.put(
            f"{USERS}/{me['id']}",
            json={"version": me["version"], "first_name": "Alicia"},
            headers=alice_headers,
        )

        response = client.put(
            f"{USERS}/{me['id']}",
            json={"version": me["version"], "first_name": "Ally"},
            headers=alice_headers,
        )

        assert response.status_code == 409
        assert "modified by another user" in response.json()["message"]

    def test_empty_update_is_rejected(self, client, alice_headers):
        me = client.get(f"{USERS}/me", headers=alice_headers).json()

        response = client.put(
            f"{USERS}/{me['id']}", json={"version": me["version"]}, headers=alice_headers
        )

        assert response.status_code == 400
        assert "body" in response.json()["errors"]

    def test_delete_blocked_by_active_workouts(self, client, alice_headers, make_workout):
        make_workout()
        me = client.get(f"{USERS}/me", headers=alice_headers).json()

        response = client.delete(f"{USERS}/{me['id']}", headers=alice_headers)

        assert response.status_code == 400
        assert "active workout" in response.json()["message"]

    def test_delete_allowed_once_workouts_are_deleted(self, client, alice_headers, make_workout):
        workout = make_workout()
        client.delete(f"/api/v1/workouts/{workout['id']}", headers=alice_headers)
        me = client.get(f"{USERS}/me", headers=alice_headers).json()

        response = client.delete(f"{USERS}/{me['id']}", headers=alice_headers)

        assert response.status_code == 204

    def test_admin_restores_deleted_user(self, client, admin_headers):
        created = client.post(USERS, json=new_user(), headers=admin_headers).json()
        client.delete(f"{USERS}/{created['id']}", headers=admin_headers)
        assert client.get(f"{USERS}/{created['id']}", headers=admin_headers).status_code == 404

        response = client.post(f"{USERS}/{created['id']}/restore", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["is_active"] is True
        assert client.get(f"{USERS}/{created['id']}", headers=admin_headers).status_code == 200

    def test_restoring_active_user_is_business_error(self, client, admin_headers):
        created = client.post(USERS, json=new_user(), headers=admin_headers).json()

        response = client.post(f"{USERS}/{created['id']}/restore", headers=admin_headers)

        assert response.status_code == 400
        assert "not deleted" in response.json()["message"]
