"""Integration tests for the FastAPI endpoints."""

import pytest


def add_image(client, **fields):
    response = client.post("/images", json=fields)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_health_and_root(client):
    assert client.get("/health").json() == {"status": "healthy"}

    data = client.get("/").json()
    assert data["status"] == "running"
    assert "version" in data


def test_suggestions(client):
    response = client.get("/search/suggestions")

    assert response.status_code == 200
    assert "beach photos" in response.json()


@pytest.mark.parametrize("query", ["", "   "])
def test_nl_search_rejects_blank_query(client, query):
    response = client.get("/search/nl", params={"q": query})

    assert response.status_code == 400


def test_nl_search_ranks_results(client):
    best = add_image(
        client,
        name="IMG_0001.jpg",
        ai_labels={"scenes": ["beach", "sunset"]},
        ai_confidence=0.8,
    )
    tagged = add_image(client, name="IMG_0002.jpg")
    client.post(f"/tags/image/{tagged}", json={"tag": "beach", "type": "AUTO_AI"})
    add_image(client, name="IMG_0003.jpg", ai_labels={"scenes": ["mountain"]})

    response = client.get("/search/nl", params={"q": "sunset photos at the beach"})

    assert response.status_code == 200
    data = response.json()
    assert [image["id"] for image in data["images"]] == [best, tagged]
    assert data["images"][0]["relevance_score"] == pytest.approx(8.0)
    assert data["images"][1]["relevance_score"] == pytest.approx(3.0)
    assert data["images"][1]["tag_names"] == ["beach"]
    assert data["pagination"] == {"page": 1, "limit": 20, "total": 2, "total_pages": 1}


def test_nl_search_omits_absent_fields(client):
    response = client.get("/search/nl", params={"q": "beach photos"})

    assert response.status_code == 200
    data = response.json()
    assert data["images"] == []
    assert data["query"]["original"] == "beach photos"
    assert data["query"]["parsed"] == {
        "keywords": [],
        "scenes": ["beach"],
        "confidence": pytest.approx(0.45),
    }


def test_nl_search_with_year_and_location(client):
    inside = add_image(
        client,
        name="IMG_0007.jpg",
        city="Lisbon",
        taken_at="2023-06-01T10:00:00",
    )
    add_image(client, name="old.jpg", city="Lisbon", taken_at="2019-06-01T10:00:00")

    response = client.get("/search/nl", params={"q": "trip from 2023 in Lisbon"})

    data = response.json()
    parsed = data["query"]["parsed"]
    assert parsed["locations"] == ["Lisbon"]
    assert parsed["dates"] == {"start": "2023-01-01T00:00:00", "end": "2023-12-31T23:59:59"}
    # Candidate by location, only the date bonus scores
    assert [image["id"] for image in data["images"]] == [inside]
    assert data["images"][0]["relevance_score"] == pytest.approx(1.0)


def test_nl_search_validates_paging(client):
    assert client.get("/search/nl", params={"q": "beach", "page": 0}).status_code == 422
    assert client.get("/search/nl", params={"q": "beach", "limit": 1000}).status_code == 422


def test_image_crud(client):
    image_id = add_image(client, name="cat.jpg", title="Whiskers")

    assert client.get(f"/images/{image_id}").json()["title"] == "Whiskers"
    assert [image["id"] for image in client.get("/images").json()] == [image_id]

    assert client.delete(f"/images/{image_id}").status_code == 200
    assert client.get(f"/images/{image_id}").status_code == 404
    assert client.delete(f"/images/{image_id}").status_code == 404


def test_image_response_carries_record_fields(client):
    image_id = add_image(
        client,
        name="rex.jpg",
        ai_labels={"objects": ["dog"]},
        ai_confidence=0.9,
        taken_at="2023-06-01T10:00:00",
        city="Lisbon",
    )
    client.post(f"/tags/image/{image_id}", json={"tag": "Rex"})

    image = client.get(f"/images/{image_id}").json()

    assert image["tag_names"] == ["Rex"]
    assert image["ai_labels"]["objects"] == ["dog"]
    assert image["ai_confidence"] == pytest.approx(0.9)
    assert image["taken_at"] == "2023-06-01T10:00:00"
    assert image["city"] == "Lisbon"
    assert "relevance_score" not in image


def test_create_image_validates_confidence(client):
    response = client.post("/images", json={"name": "x.jpg", "ai_confidence": 1.5})

    assert response.status_code == 422


def test_tags(client):
    image_id = add_image(client, name="dog.jpg")

    response = client.post(f"/tags/image/{image_id}", json={"tag": "  Rex  "})
    assert response.status_code == 200
    assert response.json()["tag"] == "Rex"

    assert client.post(f"/tags/image/{image_id}", json={"tag": " "}).status_code == 400
    assert client.post(f"/tags/image/{image_id}", json={"tag": "x", "type": "NOPE"}).status_code == 400
    assert client.post("/tags/image/999", json={"tag": "x"}).status_code == 404

    tags = client.get(f"/tags/image/{image_id}").json()
    assert tags == [{"id": tags[0]["id"], "name": "Rex", "type": "CUSTOM"}]

    summary = client.get("/tags").json()
    assert summary[0]["name"] == "Rex"
    assert summary[0]["image_count"] == 1
