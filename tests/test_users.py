from conftest import add_user, auth
from melodymakers.infrastructure.models import User


def test_create_user(client, db):
    response = client.post("/users", json={"email": "new@example.com", "name": "New"})
    assert response.status_code == 201
    data = response.json()
    assert data["acknowledged"] is True
    assert data["inserted_id"] is not None
    row = db.query(User).filter(User.email == "new@example.com").one()
    assert row.role == "unassigned"


def test_create_user_already_exists(client, db):
    add_user(db, "dup@example.com", role="student")
    response = client.post("/users", json={"email": "dup@example.com"})
    assert response.status_code == 200
    assert response.json()["message"] == "user already exists"
    assert response.json()["inserted_id"] is None
    assert db.query(User).filter(User.email == "dup@example.com").count() == 1


def test_list_users_admin_only(client, db):
    add_user(db, "admin@example.com", role="admin")
    add_user(db, "s@example.com", role="student")

    response = client.get("/users", headers=auth("admin@example.com"))
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {"admin@example.com", "s@example.com"}

    response = client.get("/users", headers=auth("s@example.com"))
    assert response.status_code == 403


def test_list_instructors_public(client, db):
    add_user(db, "i1@example.com", role="instructor")
    add_user(db, "s@example.com", role="student")
    response = client.get("/users/instructors")
    assert response.status_code == 200
    assert [u["email"] for u in response.json()] == ["i1@example.com"]


def test_change_role(client, db):
    add_user(db, "admin@example.com", role="admin")
    add_user(db, "u@example.com")
    response = client.patch(
        "/users/change-role",
        params={"email": "u@example.com", "role": "instructor"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 200
    assert response.json() == {"acknowledged": True, "matched_count": 1, "modified_count": 1}
    db.expire_all()
    assert db.query(User).filter(User.email == "u@example.com").one().role == "instructor"


def test_change_role_unknown_email_is_zero_matched(client, db):
    add_user(db, "admin@example.com", role="admin")
    response = client.patch(
        "/users/change-role",
        params={"email": "nobody@example.com", "role": "student"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 200
    assert response.json()["matched_count"] == 0


def test_change_role_rejects_unknown_role(client, db):
    add_user(db, "admin@example.com", role="admin")
    add_user(db, "u@example.com")
    response = client.patch(
        "/users/change-role",
        params={"email": "u@example.com", "role": "superuser"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 422
    db.expire_all()
    assert db.query(User).filter(User.email == "u@example.com").one().role == "unassigned"


def test_change_role_forbidden_for_non_admin(client, db):
    add_user(db, "i@example.com", role="instructor")
    add_user(db, "u@example.com")
    response = client.patch(
        "/users/change-role",
        params={"email": "u@example.com", "role": "admin"},
        headers=auth("i@example.com"),
    )
    assert response.status_code == 403
    db.expire_all()
    assert db.query(User).filter(User.email == "u@example.com").one().role == "unassigned"


def test_role_classification_self(client, db):
    add_user(db, "admin@example.com", role="admin")
    response = client.get("/users/role/admin@example.com", headers=auth("admin@example.com"))
    assert response.status_code == 200
    assert response.json() == {"admin": True, "instructor": False, "student": False}


def test_role_classification_other_email_reveals_nothing(client, db):
    add_user(db, "admin@example.com", role="admin")
    add_user(db, "s@example.com", role="student")
    response = client.get("/users/role/admin@example.com", headers=auth("s@example.com"))
    assert response.status_code == 200
    assert response.json() == {"admin": False, "instructor": False, "student": False}


def test_role_classification_requires_token(client):
    response = client.get("/users/role/admin@example.com")
    assert response.status_code == 401


def test_change_role_to_current_role_modifies_nothing(client, db):
    add_user(db, "admin@example.com", role="admin")
    add_user(db, "s@example.com", role="student")
    response = client.patch(
        "/users/change-role",
        params={"email": "s@example.com", "role": "student"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 200
    assert response.json() == {"acknowledged": True, "matched_count": 1, "modified_count": 0}
