from conftest import add_class, add_user, auth
from melodymakers.infrastructure.models import Class

CLASS_PAYLOAD = {"name": "Piano Basics", "price": 80.0, "seats": 12, "instructor_name": "Ivy"}


def test_approved_classes_sorted_by_enrollment(client, db):
    add_class(db, "Five", total_enrolled=5)
    add_class(db, "Twenty", total_enrolled=20)
    add_class(db, "One", total_enrolled=1)
    add_class(db, "Pending", status="pending", total_enrolled=99)

    response = client.get("/approved-classes")
    assert response.status_code == 200
    assert [c["total_enrolled"] for c in response.json()] == [20, 5, 1]


def test_list_all_classes_admin_only(client, db):
    add_user(db, "admin@example.com", role="admin")
    add_user(db, "s@example.com", role="student")
    add_class(db, "A", status="pending")
    add_class(db, "B")

    response = client.get("/classes", headers=auth("admin@example.com"))
    assert response.status_code == 200
    assert len(response.json()) == 2

    assert client.get("/classes", headers=auth("s@example.com")).status_code == 403
    assert client.get("/classes").status_code == 401


def test_create_class(client, db):
    add_user(db, "i@example.com", role="instructor")
    response = client.post("/classes", json=CLASS_PAYLOAD, headers=auth("i@example.com"))
    assert response.status_code == 201
    row = db.get(Class, response.json()["inserted_id"])
    assert row.instructor_email == "i@example.com"
    assert row.status == "pending"
    assert row.total_enrolled == 0
    assert row.seats == 12


def test_create_class_student_forbidden(client, db):
    add_user(db, "s@example.com", role="student")
    response = client.post("/classes", json=CLASS_PAYLOAD, headers=auth("s@example.com"))
    assert response.status_code == 403
    assert db.query(Class).count() == 0


def test_create_class_negative_seats(client, db):
    add_user(db, "i@example.com", role="instructor")
    response = client.post("/classes", json={**CLASS_PAYLOAD, "seats": -1}, headers=auth("i@example.com"))
    assert response.status_code == 422


def test_instructor_classes_self_scoped(client, db):
    add_user(db, "i@example.com", role="instructor")
    add_user(db, "other@example.com", role="instructor")
    add_class(db, "Mine", instructor_email="i@example.com", status="pending")
    add_class(db, "Theirs", instructor_email="other@example.com")

    response = client.get("/classes/i@example.com", headers=auth("i@example.com"))
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Mine"]

    response = client.get("/classes/other@example.com", headers=auth("i@example.com"))
    assert response.status_code == 403


def test_set_status(client, db):
    add_user(db, "admin@example.com", role="admin")
    row = add_class(db, status="pending")

    response = client.patch(
        "/classes/status",
        params={"id": row.id, "status": "approved"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 200
    assert response.json()["modified_count"] == 1
    assert [c["id"] for c in client.get("/approved-classes").json()] == [row.id]


def test_set_status_invalid_value(client, db):
    add_user(db, "admin@example.com", role="admin")
    row = add_class(db, status="pending")
    response = client.patch(
        "/classes/status",
        params={"id": row.id, "status": "archived"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 422


def test_set_status_malformed_id(client, db):
    add_user(db, "admin@example.com", role="admin")
    response = client.patch(
        "/classes/status",
        params={"id": "abc", "status": "approved"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 422
    assert response.json()["kind"] == "validation_error"


def test_set_status_forbidden_for_instructor(client, db):
    add_user(db, "i@example.com", role="instructor")
    row = add_class(db, status="pending", instructor_email="i@example.com")
    response = client.patch(
        "/classes/status",
        params={"id": row.id, "status": "approved"},
        headers=auth("i@example.com"),
    )
    assert response.status_code == 403
    db.expire_all()
    assert db.get(Class, row.id).status == "pending"


def test_set_feedback(client, db):
    add_user(db, "admin@example.com", role="admin")
    row = add_class(db, status="denied")
    response = client.patch(
        f"/classes/feedback/{row.id}",
        json={"feedback": "Please add a syllabus"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 200
    db.expire_all()
    assert db.get(Class, row.id).feedback == "Please add a syllabus"


def test_set_feedback_missing_class(client, db):
    add_user(db, "admin@example.com", role="admin")
    response = client.patch(
        "/classes/feedback/999",
        json={"feedback": "x"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 200
    assert response.json() == {"acknowledged": True, "matched_count": 0, "modified_count": 0}


def test_set_status_to_same_value_modifies_nothing(client, db):
    add_user(db, "admin@example.com", role="admin")
    row = add_class(db, status="approved")
    response = client.patch(
        "/classes/status",
        params={"id": row.id, "status": "approved"},
        headers=auth("admin@example.com"),
    )
    assert response.status_code == 200
    assert response.json() == {"acknowledged": True, "matched_count": 1, "modified_count": 0}
