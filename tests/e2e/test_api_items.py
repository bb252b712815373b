import sqlite3
import time

import pytest
from fastapi.testclient import TestClient

from catalog.main import create_app
from catalog.services.images import content_reference


@pytest.fixture
def client(test_settings):
    app = create_app(test_settings)
    with TestClient(app) as client:
        yield client


def post_item(client, name="iPhone 16e", category="phone", image=b"fake image content"):
    files = {"image": ("phone.jpg", image, "image/jpeg")}
    return client.post("/items", data={"name": name, "category": category}, files=files)


@pytest.mark.e2e
def test_hello(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Hello, world!"}


@pytest.mark.e2e
def test_add_item(client):
    response = post_item(client)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "item received: iPhone 16e"
    assert data["item"]["category"] == "phone"
    assert data["item"]["image_name"] == content_reference(b"fake image content")


@pytest.mark.e2e
@pytest.mark.parametrize(
    "form, with_image",
    [
        ({"category": "phone"}, True),
        ({"name": "iPhone 16e"}, True),
        ({"name": "iPhone 16e", "category": "phone"}, False),
        ({"name": "", "category": "phone"}, True),
    ],
)
def test_add_item_missing_fields(client, form, with_image):
    files = {"image": ("phone.jpg", b"img", "image/jpeg")} if with_image else None
    response = client.post("/items", data=form, files=files)

    assert response.status_code == 400


@pytest.mark.e2e
def test_add_item_empty_image(client):
    response = post_item(client, image=b"")

    assert response.status_code == 400


@pytest.mark.e2e
def test_add_item_too_large(test_settings):
    test_settings.MAX_UPLOAD_SIZE = 4
    with TestClient(create_app(test_settings)) as client:
        response = post_item(client, image=b"12345")

    assert response.status_code == 400


@pytest.mark.e2e
def test_list_and_get_items(client):
    post_item(client, name="iPhone 16e")
    post_item(client, name="Galaxy S24", image=b"other image")

    listing = client.get("/items")
    assert listing.status_code == 200
    items = listing.json()["items"]
    assert [i["name"] for i in items] == ["iPhone 16e", "Galaxy S24"]

    single = client.get(f"/items/{items[1]['id']}")
    assert single.status_code == 200
    assert single.json() == items[1]


@pytest.mark.e2e
@pytest.mark.parametrize(
    "item_id, expected",
    [
        ("abc", 400),
        ("0", 400),
        ("-1", 400),
        ("1_000", 400),
        (" 7 ", 400),
        ("+5", 400),
        ("99", 404),
        ("99999999999999999999", 404),
    ],
)
def test_get_item_errors(client, item_id, expected):
    response = client.get(f"/items/{item_id}")

    assert response.status_code == expected


@pytest.mark.e2e
def test_search(client):
    post_item(client, name="iPhone 16e")
    post_item(client, name="Galaxy S24")

    found = client.get("/search", params={"keyword": "phone"})
    assert found.status_code == 200
    assert [i["name"] for i in found.json()["items"]] == ["iPhone 16e"]

    empty = client.get("/search", params={"keyword": "zzz"})
    assert empty.status_code == 200
    assert empty.json() == {"items": []}


@pytest.mark.e2e
def test_search_requires_keyword(client):
    assert client.get("/search").status_code == 400
    assert client.get("/search", params={"keyword": ""}).status_code == 400


@pytest.mark.e2e
def test_get_image(client):
    image_name = post_item(client).json()["item"]["image_name"]

    response = client.get(f"/images/{image_name}")

    assert response.status_code == 200
    assert response.content == b"fake image content"
    assert response.headers["content-type"] == "image/jpeg"


@pytest.mark.e2e
def test_get_image_falls_back_to_default(client, image_dir):
    with open(f"{image_dir}/default.jpg", "wb") as f:
        f.write(b"default image")

    response = client.get("/images/" + "0" * 64 + ".jpg")

    assert response.status_code == 200
    assert response.content == b"default image"


@pytest.mark.e2e
def test_get_image_without_default(client):
    response = client.get("/images/missing.jpg")

    assert response.status_code == 404
    assert response.json()["code"] == "IMAGE_NOT_FOUND"


@pytest.mark.e2e
def test_get_image_rejects_other_suffix(client):
    assert client.get("/images/notes.txt").status_code == 400


@pytest.mark.e2e
def test_cors_allows_front_url(client):
    response = client.get("/", headers={"Origin": "http://localhost:3000"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


@pytest.mark.e2e
def test_locked_database_answers_within_request_timeout(test_settings, db_path):
    test_settings.REQUEST_TIMEOUT = 0.1
    with TestClient(create_app(test_settings)) as client:
        lock = sqlite3.connect(db_path, isolation_level=None)
        lock.execute("BEGIN EXCLUSIVE")
        try:
            started = time.monotonic()
            response = client.get("/items")
            elapsed = time.monotonic() - started
        finally:
            lock.execute("ROLLBACK")
            lock.close()

    assert response.status_code == 500
    assert response.json()["code"] == "SEARCH_FAILED"
    assert elapsed < 2.0
