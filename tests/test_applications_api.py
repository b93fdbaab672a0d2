"""HTTP tests for /api/groups/applications."""

from __future__ import annotations

from studyspace.models.membership import GroupMember


def test_apply_review_flow(client, db, make_user, make_group, headers):
    bob = make_user("bob")
    alice = make_user("alice")
    group = make_group(bob)

    r = client.post(
        "/api/groups/applications",
        json={"group_id": group.id, "message": "let me in"},
        headers=headers("alice"),
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Application submitted successfully"
    assert isinstance(body["application_id"], int)

    r = client.get("/api/groups/applications/pending", headers=headers("bob"))
    assert r.status_code == 200
    pending = r.json()
    assert len(pending) == 1
    assert pending[0]["username"] == "alice"
    assert pending[0]["status"] == "pending"
    assert pending[0]["message"] == "let me in"

    r = client.patch(
        f"/api/groups/applications/{group.id}/review",
        json={"username": "alice", "status": "approved"},
        headers=headers("bob"),
    )
    assert r.status_code == 200
    assert r.json() == {"message": "Application reviewed successfully", "status": "approved"}

    assert db.get(GroupMember, (group.id, alice.user_id)).role == "member"
    assert client.get("/api/groups/applications/pending", headers=headers("bob")).json() == []


def test_duplicate_application_is_400(client, make_user, make_group, headers):
    group = make_group(make_user("bob"))
    make_user("alice")
    payload = {"group_id": group.id, "message": ""}

    assert client.post("/api/groups/applications", json=payload, headers=headers("alice")).status_code == 201
    r = client.post("/api/groups/applications", json=payload, headers=headers("alice"))

    assert r.status_code == 400
    assert r.json() == {"detail": "application already submitted and pending"}


def test_member_apply_is_400(client, make_user, make_group, headers):
    group = make_group(make_user("bob"))

    r = client.post("/api/groups/applications", json={"group_id": group.id}, headers=headers("bob"))

    assert r.status_code == 400
    assert r.json()["detail"] == "user is already a group member"


def test_apply_unknown_group_is_404(client, make_user, headers):
    make_user("alice")
    r = client.post("/api/groups/applications", json={"group_id": 999}, headers=headers("alice"))
    assert r.status_code == 404
    assert r.json()["detail"] == "group not found"


def test_token_for_deleted_user_is_404(client, make_user, make_group, headers):
    group = make_group(make_user("bob"))
    r = client.post("/api/groups/applications", json={"group_id": group.id}, headers=headers("ghost"))
    assert r.status_code == 404


def test_requires_token(client):
    r = client.post("/api/groups/applications", json={"group_id": 1})
    assert r.status_code == 401

    r = client.get("/api/groups/applications/pending", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401


def test_review_by_outsider_is_403(client, make_user, make_group, headers):
    group = make_group(make_user("bob"))
    make_user("alice")
    make_user("carol")
    client.post("/api/groups/applications", json={"group_id": group.id}, headers=headers("alice"))

    r = client.patch(
        f"/api/groups/applications/{group.id}/review",
        json={"username": "alice", "status": "approved"},
        headers=headers("carol"),
    )

    assert r.status_code == 403
    assert r.json()["detail"] == "unauthorized: not an admin or moderator"


def test_review_invalid_status_is_400(client, make_user, make_group, headers):
    group = make_group(make_user("bob"))
    make_user("alice")
    client.post("/api/groups/applications", json={"group_id": group.id}, headers=headers("alice"))

    r = client.patch(
        f"/api/groups/applications/{group.id}/review",
        json={"username": "alice", "status": "maybe"},
        headers=headers("bob"),
    )

    assert r.status_code == 400
    assert r.json()["detail"] == "invalid status. Must be 'approved' or 'rejected'"


def test_review_without_pending_is_404(client, make_user, make_group, headers):
    group = make_group(make_user("bob"))
    make_user("alice")

    r = client.patch(
        f"/api/groups/applications/{group.id}/review",
        json={"username": "alice", "status": "rejected"},
        headers=headers("bob"),
    )

    assert r.status_code == 404
    assert r.json()["detail"] == "no pending application found"


def test_pending_limit(client, make_user, make_group, headers):
    group = make_group(make_user("bob"))
    for name in ("alice", "carol", "erin"):
        make_user(name)
        client.post("/api/groups/applications", json={"group_id": group.id}, headers=headers(name))

    r = client.get("/api/groups/applications/pending?limit=2", headers=headers("bob"))

    assert r.status_code == 200
    assert [a["username"] for a in r.json()] == ["alice", "carol"]
