"""
Sign-up, login, verification links, and admin user management
"""
from conftest import ADMIN_EMAIL, PASSWORD, auth, sign_up_verified


# ===== SIGN UP =====

def test_admin_sign_up_is_immediate(client, sender):
    response = client.post("/api/users", json={"email": ADMIN_EMAIL, "password": "x"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == ADMIN_EMAIL
    assert data["isAdmin"] is True
    assert data["isEditor"] is False
    assert data["token"]
    assert sender.sent == []


def test_sign_up_sends_verification(client, sender):
    response = client.post("/api/users", json={"email": "t@school.org", "password": PASSWORD})
    assert response.json() == {"type": "success"}
    assert len(sender.sent) == 1
    assert sender.sent[0]["email"] == "t@school.org"
    assert sender.sent[0]["action"] == "sign up"


def test_verification_link_creates_account(client, sender):
    data = sign_up_verified(client, sender, "t@school.org")
    assert data["email"] == "t@school.org"
    assert data["isAdmin"] is False

    me = client.get("/api/session", headers=auth(data["token"]))
    assert me.json()["data"]["id"] == data["id"]


def test_verification_link_single_use(client, sender):
    client.post("/api/users", json={"email": "t@school.org", "password": PASSWORD})
    path = sender.last_path()
    assert client.get(path).status_code == 200
    response = client.get(path)
    assert response.status_code == 404
    assert response.json()["error"] == "verificationInvalid"


def test_unknown_verification_token(client):
    response = client.get("/api/verify/not-a-token")
    assert response.status_code == 404
    assert response.json()["error"] == "verificationInvalid"


def test_sign_up_invalid_email(client):
    response = client.post("/api/users", json={"email": "not-an-email", "password": PASSWORD})
    assert response.status_code == 400
    assert response.json()["error"] == "emailInvalid"


def test_sign_up_invalid_password(client):
    response = client.post("/api/users", json={"email": "t@school.org", "password": "short"})
    assert response.status_code == 400
    assert response.json()["error"] == "passwordInvalid"


def test_sign_up_domain_not_allowed(client):
    response = client.post("/api/users", json={"email": "t@gmail.com", "password": PASSWORD})
    assert response.status_code == 403
    assert response.json()["error"] == "emailDomainNotAllowed"


def test_sign_up_body_must_be_strings(client):
    response = client.post("/api/users", json={"email": 5, "password": PASSWORD})
    assert response.status_code == 400
    assert response.json()["error"] == "requestBodyInvalid"


def test_sign_up_duplicate_email(client, sender, user):
    response = client.post("/api/users", json={"email": user["email"], "password": PASSWORD})
    assert response.status_code == 409
    assert response.json()["error"] == "emailTaken"


def test_sign_up_requires_logged_out(client, user):
    response = client.post(
        "/api/users",
        json={"email": "other@school.org", "password": PASSWORD},
        headers=auth(user["token"]),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "mustBeLoggedOut"


# ===== SESSION =====

def test_login(client, user):
    response = client.post("/api/session", json={"email": user["email"], "password": PASSWORD})
    assert response.status_code == 200
    assert response.json()["data"]["id"] == user["id"]


def test_login_wrong_password(client, user):
    response = client.post("/api/session", json={"email": user["email"], "password": "wrong1234"})
    assert response.status_code == 401
    assert response.json()["error"] == "invalidCredentials"


def test_session_requires_login(client):
    response = client.get("/api/session")
    assert response.status_code == 401


def test_garbage_token_is_anonymous(client):
    response = client.get("/api/session", headers=auth("garbage"))
    assert response.status_code == 401
    assert response.json()["error"] == "notLoggedIn"


# ===== ADMIN USER MANAGEMENT =====

def test_list_users_admin_only(client, user, admin_token):
    assert client.get("/api/users", headers=auth(user["token"])).status_code == 403

    response = client.get("/api/users", headers=auth(admin_token))
    emails = [u["email"] for u in response.json()["data"]]
    assert emails == [user["email"], ADMIN_EMAIL]
    assert set(response.json()["data"][0]) == {"id", "email", "isEditor", "isAdmin"}


def test_get_user_by_id(client, user, admin_token):
    response = client.get(f"/api/users/{user['id']}", headers=auth(admin_token))
    assert response.json()["data"]["email"] == user["email"]

    response = client.get("/api/users/nope", headers=auth(admin_token))
    assert response.json() == {"type": "data", "data": None}


def test_patch_user_refreshes_cached_entry(client, user, admin_token):
    client.get("/api/users", headers=auth(admin_token))
    fetches = client.app.state.users_cache.get_stats()["fetches"]

    response = client.patch(
        f"/api/users/{user['id']}",
        json={"isEditor": True, "email": "renamed@school.org"},
        headers=auth(admin_token),
    )
    assert response.json()["data"] == {
        "id": user["id"],
        "email": "renamed@school.org",
        "isEditor": True,
    }

    listed = client.get("/api/users", headers=auth(admin_token)).json()["data"]
    assert listed[0]["email"] == "renamed@school.org"
    assert listed[0]["isEditor"] is True
    assert client.app.state.users_cache.get_stats()["fetches"] == fetches


def test_patch_user_rejects_wrong_types(client, user, admin_token):
    response = client.patch(
        f"/api/users/{user['id']}", json={"isEditor": "maybe"}, headers=auth(admin_token)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "requestBodyInvalid"


def test_patch_unknown_user(client, admin_token):
    response = client.patch("/api/users/nope", json={"isEditor": True}, headers=auth(admin_token))
    assert response.status_code == 404
    assert response.json()["error"] == "modifyNonexistent"


def test_patch_user_email_taken(client, sender, user, admin_token):
    other = sign_up_verified(client, sender, "other@school.org")
    response = client.patch(
        f"/api/users/{other['id']}", json={"email": user["email"]}, headers=auth(admin_token)
    )
    assert response.status_code == 409


# ===== PASSWORD CHANGE =====

def test_change_password_after_verification(client, sender, user):
    response = client.patch(
        "/api/users", json={"password": "newpass1234"}, headers=auth(user["token"])
    )
    assert response.json() == {"type": "success"}
    assert sender.sent[-1]["action"] == "change your password"

    # Old password still works until the link is followed
    ok = client.post("/api/session", json={"email": user["email"], "password": PASSWORD})
    assert ok.status_code == 200

    assert client.get(sender.last_path()).json() == {"type": "success"}
    old = client.post("/api/session", json={"email": user["email"], "password": PASSWORD})
    new = client.post("/api/session", json={"email": user["email"], "password": "newpass1234"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_change_password_requires_login(client):
    response = client.patch("/api/users", json={"password": "newpass1234"})
    assert response.status_code == 401


def test_change_password_validates_format(client, user):
    response = client.patch("/api/users", json={"password": "x"}, headers=auth(user["token"]))
    assert response.status_code == 400
    assert response.json()["error"] == "passwordInvalid"
