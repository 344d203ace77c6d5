"""HTTP surface tests — routers over an in-memory database."""

import pytest
from httpx import ASGITransport, AsyncClient

from course_reviews.database import get_db
from course_reviews.main import app

REVIEW_BODY = {
    "professor": "Jane Smith",
    "course": "101 Intro to CS",
    "year": "2024",
    "term": "1",
    "title": "Solid first course",
    "content": "Clear lectures and fair exams.",
    "courseRating": "4",
    "courseDifficultyRating": "3",
    "courseWorkload": "3",
    "professorRating": "5",
    "professorDifficultyRating": "2",
    "lectureRating": "4",
}


@pytest.fixture
async def client(session_factory, catalogue):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def as_user(user_id: str) -> dict:
    return {"X-User-ID": user_id}


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_review_lifecycle(client):
    await client.post("/subscriptions", json={"course_code": 101}, headers=as_user("bob"))

    created = await client.post("/reviews", json=REVIEW_BODY, headers=as_user("alice"))
    assert created.status_code == 201
    review = created.json()
    assert review["course_code"] == 101
    assert review["professor_id"] is not None

    detail = await client.get(f"/reviews/{review['id']}")
    assert detail.json()["course"]["name"] == "Intro to CS"

    inbox = (await client.get("/notifications", headers=as_user("bob"))).json()
    assert len(inbox) == 1
    assert inbox[0]["review"]["id"] == review["id"]

    voted = await client.post(
        f"/reviews/{review['id']}/vote", json={"upvote": True}, headers=as_user("bob")
    )
    assert voted.json()["action"] == "created"

    alice_inbox = (await client.get("/notifications", headers=as_user("alice"))).json()
    assert alice_inbox[0]["vote"]["upvote"] is True

    updated = await client.put(
        f"/reviews/{review['id']}",
        json={**REVIEW_BODY, "title": "Revised"},
        headers=as_user("alice"),
    )
    assert updated.status_code == 200
    assert updated.json()["title"] == "Revised"

    deleted = await client.delete(f"/reviews/{review['id']}", headers=as_user("alice"))
    assert deleted.status_code == 200
    assert deleted.json()["id"] == review["id"]

    missing = await client.get(f"/reviews/{review['id']}")
    assert missing.status_code == 404
    assert missing.headers["X-Error-Code"] == "NOT_FOUND"


async def test_only_the_author_may_edit_or_delete(client):
    review = (await client.post("/reviews", json=REVIEW_BODY, headers=as_user("alice"))).json()

    edit = await client.put(f"/reviews/{review['id']}", json=REVIEW_BODY, headers=as_user("mallory"))
    assert edit.status_code == 403
    delete = await client.delete(f"/reviews/{review['id']}", headers=as_user("mallory"))
    assert delete.status_code == 403


async def test_bad_form_is_rejected(client):
    response = await client.post(
        "/reviews", json={**REVIEW_BODY, "course": "Intro to CS"}, headers=as_user("alice")
    )
    assert response.status_code == 422
    assert response.headers["X-Error-Code"] == "VALIDATION_ERROR"

    response = await client.post(
        "/reviews", json={**REVIEW_BODY, "lectureRating": "9"}, headers=as_user("alice")
    )
    assert response.status_code == 422


async def test_missing_user_header(client):
    response = await client.post("/reviews", json=REVIEW_BODY)
    assert response.status_code == 422


async def test_subscriptions_endpoints(client):
    bad = await client.post(
        "/subscriptions", json={"course_code": 101, "professor_id": 1}, headers=as_user("bob")
    )
    assert bad.status_code == 422

    created = await client.post("/subscriptions", json={"course_code": 202}, headers=as_user("bob"))
    assert created.status_code == 201
    subscription_id = created.json()["id"]

    listed = (await client.get("/subscriptions", headers=as_user("bob"))).json()
    assert [s["course"]["code"] for s in listed] == [202]

    assert (await client.delete(f"/subscriptions/{subscription_id}", headers=as_user("eve"))).status_code == 404
    assert (await client.delete(f"/subscriptions/{subscription_id}", headers=as_user("bob"))).status_code == 204
    assert (await client.get("/subscriptions", headers=as_user("bob"))).json() == []


async def test_notification_read_and_dismiss(client):
    await client.post("/subscriptions", json={"course_code": 101}, headers=as_user("bob"))
    await client.post("/reviews", json=REVIEW_BODY, headers=as_user("alice"))
    await client.post("/reviews", json={**REVIEW_BODY, "title": "Second"}, headers=as_user("carol"))

    inbox = (await client.get("/notifications", headers=as_user("bob"))).json()
    assert len(inbox) == 2

    unread = (await client.get("/notifications/unread-count", headers=as_user("bob"))).json()
    assert unread["unread"] == 2

    first_id = inbox[0]["id"]
    assert (await client.post(f"/notifications/{first_id}/read", headers=as_user("bob"))).status_code == 204
    read_all = (await client.post("/notifications/read-all", headers=as_user("bob"))).json()
    assert read_all["updated"] == 1

    assert (await client.delete(f"/notifications/{first_id}", headers=as_user("alice"))).status_code == 404
    assert (await client.delete(f"/notifications/{first_id}", headers=as_user("bob"))).status_code == 204
    remaining = (await client.get("/notifications", headers=as_user("bob"))).json()
    assert len(remaining) == 1 and remaining[0]["read"] is True


async def test_catalogue_listings(client):
    courses = (await client.get("/courses")).json()
    assert [c["code"] for c in courses] == [101, 202]
    assert courses[0]["name"] == "Intro to CS"

    searched = (await client.get("/courses", params={"search": "systems"})).json()
    assert [c["code"] for c in searched] == [202]

    professors = (await client.get("/professors")).json()
    assert [p["last_name"] for p in professors] == ["SMITH", "TURING"]

    searched = (await client.get("/professors", params={"search": "alan"})).json()
    assert [(p["first_name"], p["last_name"]) for p in searched] == [("ALAN", "TURING")]
