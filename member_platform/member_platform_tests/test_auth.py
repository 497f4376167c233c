import re

from member_platform.member_platform.member_service.models import User


def test_root_greeting(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "Hello Technigo!"


def test_register_and_login(client, register):
    reg = register("alice", "a@x.com", "pw123")
    assert reg.status_code == 201
    body = reg.json()
    assert body["success"] is True
    assert body["response"]["username"] == "alice"
    assert body["response"]["useremail"] == "a@x.com"
    assert body["response"]["id"]
    token = body["response"]["accessToken"]

    login = client.post("/login", json={"username": "alice", "password": "pw123"})
    assert login.status_code == 200
    data = login.json()
    assert data["success"] is True
    assert data["response"]["discount"] == 0.1
    assert data["response"]["accessToken"] == token
    assert data["response"]["id"] == body["response"]["id"]
    assert data["response"]["useremail"] == "a@x.com"

    bad = client.post("/login", json={"username": "alice", "password": "wrong"})
    assert bad.status_code == 401


def test_register_response_never_contains_password(register):
    reg = register()
    assert reg.status_code == 201
    assert "password" not in reg.json()["response"]
    assert "pw123" not in reg.text


def test_access_token_is_256_hex_chars_and_unique(register):
    t1 = register("alice", "a@x.com").json()["response"]["accessToken"]
    t2 = register("bob", "b@x.com").json()["response"]["accessToken"]
    assert re.fullmatch(r"[0-9a-f]{256}", t1)
    assert re.fullmatch(r"[0-9a-f]{256}", t2)
    assert t1 != t2


def test_register_duplicate_username(register):
    first = register("alice", "a@x.com")
    assert first.status_code == 201

    second = register("alice", "other@x.com")
    assert second.status_code == 400
    body = second.json()
    assert body["success"] is False
    assert body["response"]["error"] == "conflict"
    assert body["response"]["message"] == "Username already exists"


def test_register_duplicate_email_is_case_insensitive(register):
    assert register("alice", "a@x.com").status_code == 201

    second = register("bob", "A@X.COM")
    assert second.status_code == 400
    assert second.json()["response"]["error"] == "conflict"
    assert second.json()["response"]["message"] == "Email already exists"


def test_register_lowercases_email(register, db_session):
    reg = register("carol", "Carol@Example.COM")
    assert reg.status_code == 201
    assert reg.json()["response"]["useremail"] == "carol@example.com"

    user = db_session.query(User).filter(User.username == "carol").first()
    assert user.useremail == "carol@example.com"


def test_register_invalid_email(register):
    r = register("dave", "not-an-email")
    assert r.status_code == 400
    assert r.json()["response"] == {"error": "validation", "message": "Invalid email address"}


def test_register_empty_password(register):
    r = register("erin", "e@x.com", "")
    assert r.status_code == 400
    assert r.json()["response"]["message"] == "Password is required"


def test_register_missing_fields(client):
    # Missing required fields are reported as validation errors
    r = client.post("/register", json={"username": "user1", "password": "pass"})
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert r.json()["response"]["error"] == "validation"


def test_login_unknown_user_matches_wrong_password(client, register):
    register()
    unknown = client.post("/login", json={"username": "nobody", "password": "pw123"})
    wrong = client.post("/login", json={"username": "alice", "password": "nope"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()
    assert wrong.json()["response"]["message"] == "Credentials do not match"


def test_login_grants_membership_idempotently(client, register, db_session):
    register()
    user = db_session.query(User).filter(User.username == "alice").first()
    assert user.is_member is False
    assert user.discount == 0
    token = user.access_token

    for _ in range(2):
        r = client.post("/login", json={"username": "alice", "password": "pw123"})
        assert r.status_code == 200
        db_session.expire_all()
        user = db_session.query(User).filter(User.username == "alice").first()
        assert user.is_member is True
        assert user.discount == 0.1
        assert user.access_token == token


def test_failed_login_does_not_grant_membership(client, register, db_session):
    register()
    client.post("/login", json={"username": "alice", "password": "wrong"})
    user = db_session.query(User).filter(User.username == "alice").first()
    assert user.is_member is False
    assert user.discount == 0


def test_stored_password_is_salted_hash(register, db_session):
    register("alice", "a@x.com", "pw123")
    register("bob", "b@x.com", "pw123")
    alice = db_session.query(User).filter(User.username == "alice").first()
    bob = db_session.query(User).filter(User.username == "bob").first()
    assert alice.password != "pw123"
    assert alice.password.startswith("$pbkdf2-sha256$")
    # same password, different salt
    assert alice.password != bob.password


def test_register_rejects_email_with_trailing_newline(register, db_session):
    assert register("alice", "a@x.com").status_code == 201

    r = register("zed", "a@x.com\n")
    assert r.status_code == 400
    assert r.json()["response"] == {"error": "validation", "message": "Invalid email address"}
    assert db_session.query(User).count() == 1


def test_register_openapi_lists_only_reachable_errors(client):
    paths = client.get("/openapi.json").json()["paths"]
    assert "401" not in paths["/register"]["post"]["responses"]
    assert "401" in paths["/login"]["post"]["responses"]
    assert "404" in paths["/delete/{user_id}"]["delete"]["responses"]
