"""Course routes — artist reference checks, level whitelist, list envelope."""

import json


async def test_create_course_for_existing_artist(client, seed_course):
    resp = await client.post(
        "/api/v1/courses",
        json={
            "title": "Cool Jazz Voicings",
            "level": "advanced",
            "artistId": seed_course["artist_id"],
        },
    )

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["artistId"] == seed_course["artist_id"]
    assert data["level"] == "advanced"


async def test_create_course_without_artist(client):
    resp = await client.post("/api/v1/courses", json={"title": "Ear Training"})

    assert resp.status_code == 201
    assert resp.json()["data"]["artistId"] is None
    assert resp.json()["data"]["level"] == "beginner"


async def test_create_course_for_missing_artist_is_404(client):
    resp = await client.post(
        "/api/v1/courses", json={"title": "Ghost Course", "artistId": 4242},
    )

    assert resp.status_code == 404
    assert "4242" in resp.json()["data"]["message"]


async def test_create_course_rejects_unknown_level(client):
    resp = await client.post(
        "/api/v1/courses", json={"title": "Scales", "level": "expert"},
    )

    assert resp.status_code == 422
    detail = resp.json()["data"][0]
    assert detail["field"] == "level"
    assert detail["type"] == "any.only"
    assert "beginner" in detail["message"]


async def test_create_course_rejects_short_title(client):
    resp = await client.post("/api/v1/courses", json={"title": "ab"})

    assert resp.status_code == 422
    assert resp.json()["data"][0]["type"] == "string.min"


async def test_list_courses_filtered_by_artist(client, seed_course):
    resp = await client.get(
        "/api/v1/courses",
        params={"aggregate": json.dumps({"artistId": seed_course["artist_id"]})},
    )

    body = resp.json()
    assert resp.status_code == 200
    assert [c["title"] for c in body["data"]] == ["Modal Jazz 101"]
    assert body["meta"] == {"totalCount": 1, "page": 1, "limit": 10, "pageCount": 1}


async def test_list_courses_unknown_operator_is_500(client, seed_course):
    resp = await client.get(
        "/api/v1/courses",
        params={"aggregate": json.dumps({"level": {"$regex": "beg"}})},
    )

    assert resp.status_code == 500
    assert "$regex" in resp.json()["data"]


async def test_update_course_level(client, seed_course):
    resp = await client.put(
        f"/api/v1/courses/{seed_course['course_id']}",
        json={"level": "intermediate"},
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["level"] == "intermediate"
    assert resp.json()["data"]["title"] == "Modal Jazz 101"


async def test_update_course_to_missing_artist_is_404(client, seed_course):
    resp = await client.put(
        f"/api/v1/courses/{seed_course['course_id']}", json={"artistId": 999},
    )

    assert resp.status_code == 404


async def test_delete_course(client, seed_course):
    course_id = seed_course["course_id"]

    resp = await client.delete(f"/api/v1/courses/{course_id}")

    assert resp.status_code == 200
    assert (await client.get(f"/api/v1/courses/{course_id}")).status_code == 404
