"""HTTP tests for /api/subjects."""

from __future__ import annotations

from studyspace.models.academic_group import AcademicGroup
from studyspace.models.subject import Subject
from studyspace.models.task import Task


def test_create_get_update_subject(client, make_user, academic_group, headers):
    make_user("bob")

    r = client.post(
        "/api/subjects",
        json={"name": "Physics", "academic_group_id": academic_group.id},
        headers=headers("bob"),
    )
    assert r.status_code == 201
    subject_id = r.json()["id"]

    r = client.get(f"/api/subjects/{subject_id}", headers=headers("bob"))
    assert r.json() == {"id": subject_id, "name": "Physics", "academic_group_id": academic_group.id}

    r = client.patch(f"/api/subjects/{subject_id}", json={"name": "Quantum physics"}, headers=headers("bob"))
    assert r.status_code == 200
    assert r.json()["name"] == "Quantum physics"

    assert client.patch(f"/api/subjects/{subject_id}", json={"name": ""}, headers=headers("bob")).status_code == 400


def test_create_subject_unknown_academic_group(client, make_user, headers):
    make_user("bob")
    r = client.post("/api/subjects", json={"name": "Physics", "academic_group_id": 7}, headers=headers("bob"))
    assert r.status_code == 404


def test_get_unknown_subject(client, make_user, headers):
    make_user("bob")
    assert client.get("/api/subjects/999", headers=headers("bob")).status_code == 404


def test_delete_subject_keeps_tasks(client, db, make_user, make_group, academic_group, headers):
    bob = make_user("bob")
    group = make_group(bob)
    subject = Subject(name="History", academic_group_id=academic_group.id)
    db.add(subject)
    db.commit()
    task = Task(group_id=group.id, user_id=bob.user_id, subject_id=subject.id, title="essay")
    db.add(task)
    db.commit()
    subject_id, task_id = subject.id, task.id

    r = client.delete(f"/api/subjects/{subject_id}", headers=headers("bob"))

    assert r.status_code == 200
    assert r.json() == {"ok": True, "deleted_subject_id": subject_id}
    db.expire_all()
    assert db.get(Subject, subject_id) is None
    assert db.get(Task, task_id).subject_id is None


def test_my_group_subjects(client, db, make_user, make_group, academic_group, headers):
    bob = make_user("bob")
    group = make_group(bob)
    other_ag = AcademicGroup(name="ИКБО-15-20")
    db.add(other_ag)
    db.commit()
    db.add_all([
        Subject(name="Mathematics", academic_group_id=academic_group.id),
        Subject(name="Physics", academic_group_id=other_ag.id),
    ])
    db.commit()

    r = client.get("/api/subjects/my-groups", headers=headers("bob"))

    assert r.status_code == 200
    body = r.json()
    assert [s["name"] for s in body["subjects"]] == ["Mathematics"]
    detail = body["subjects"][0]
    assert detail["academic_group"]["id"] == academic_group.id
    assert [g["id"] for g in detail["groups"]] == [group.id]
    assert body["pagination"]["total"] == 1


def test_my_group_subjects_without_groups(client, make_user, headers):
    make_user("bob")
    r = client.get("/api/subjects/my-groups", headers=headers("bob"))
    assert r.status_code == 200
    assert r.json()["subjects"] == []
    assert r.json()["pagination"] == {"page": 1, "page_size": 10, "total": 0, "pages": 0}


def test_create_subject_blank_name_is_400(client, db, make_user, academic_group, headers):
    make_user("bob")
    r = client.post(
        "/api/subjects",
        json={"name": "   ", "academic_group_id": academic_group.id},
        headers=headers("bob"),
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "name is required"
    assert db.query(Subject).count() == 0
