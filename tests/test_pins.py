"""Pins: creation rules, saves, likes and engagement counters."""
from pinboard.services.analytics import detect_device_type, location_key

API = "/api"


async def test_create_pin(client, api, db):
    alice = await api.register("alice")
    board = await api.board(alice)

    pin = await api.pin(
        alice, board, "Oak shelves",
        description="Floating",
        link="https://example.com/shelves",
        tags=["diy", " wood ", "diy"],
        category="home",
    )

    assert pin["owner_id"] == alice["id"]
    assert pin["board_id"] == board["_id"]
    assert pin["tags"] == ["diy", "wood"]
    assert pin["save_count"] == 0
    assert pin["owner"]["username"] == "alice"
    assert pin["board"]["name"] == board["name"]

    stored_board = await client.get(f"{API}/boards/{board['_id']}")
    assert stored_board.json()["pins"] == [pin["_id"]]
    assert (await db.users.find_one({"username": "alice"}))["total_pins"] == 1


async def test_create_pin_ignores_server_owned_fields(client, api):
    alice = await api.register("alice")
    board = await api.board(alice)

    pin = await api.pin(alice, board, owner_id="0" * 24, save_count=99, saves=["x"])

    assert pin["owner_id"] == alice["id"]
    assert pin["save_count"] == 0
    assert pin["saves"] == []


async def test_create_pin_on_foreign_board_is_denied(client, api, db):
    alice = await api.register("alice")
    mallory = await api.register("mallory")
    board = await api.board(alice)

    resp = await client.post(
        f"{API}/pins",
        json={"title": "sneaky", "image_url": "https://images.example.com/x.jpg", "board_id": board["_id"]},
        headers=api.headers(mallory),
    )

    assert resp.status_code == 403
    assert await db.pins.count_documents({}) == 0


async def test_create_pin_validation(client, api):
    alice = await api.register("alice")
    board = await api.board(alice)
    base = {"title": "t", "image_url": "https://images.example.com/x.jpg", "board_id": board["_id"]}

    for override in ({"title": ""}, {"image_url": "ftp://nope"}, {"link": "javascript:alert(1)"}):
        resp = await client.post(f"{API}/pins", json={**base, **override}, headers=api.headers(alice))
        assert resp.status_code == 400, override

    uploaded = await client.post(
        f"{API}/pins", json={**base, "image_url": "/uploads/abc.png"}, headers=api.headers(alice)
    )
    assert uploaded.status_code == 201


async def test_create_pin_requires_auth(client, api):
    alice = await api.register("alice")
    board = await api.board(alice)

    resp = await client.post(
        f"{API}/pins",
        json={"title": "t", "image_url": "https://images.example.com/x.jpg", "board_id": board["_id"]},
    )

    assert resp.status_code == 401


async def test_save_twice_conflicts(client, api):
    alice = await api.register("alice")
    bob = await api.register("bob")
    pin = await api.pin(alice, await api.board(alice))
    url = f"{API}/pins/{pin['_id']}/save"

    first = await client.post(url, headers=api.headers(bob))
    second = await client.post(url, headers=api.headers(bob))

    assert first.status_code == 200
    assert first.json()["saves"] == [bob["id"]]
    assert first.json()["save_count"] == 1
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "ALREADY_SAVED"

    current = await client.get(f"{API}/pins/{pin['_id']}")
    assert current.json()["saves"] == [bob["id"]]
    assert current.json()["save_count"] == 1


async def test_unsave_is_idempotent(client, api):
    alice = await api.register("alice")
    bob = await api.register("bob")
    pin = await api.pin(alice, await api.board(alice))
    url = f"{API}/pins/{pin['_id']}/save"
    await client.post(url, headers=api.headers(bob))

    first = await client.delete(url, headers=api.headers(bob))
    second = await client.delete(url, headers=api.headers(bob))

    assert first.status_code == second.status_code == 200
    assert second.json()["saves"] == []
    assert second.json()["save_count"] == 0


async def test_like_and_unlike(client, api):
    alice = await api.register("alice")
    bob = await api.register("bob")
    pin = await api.pin(alice, await api.board(alice))
    url = f"{API}/pins/{pin['_id']}/like"

    liked = await client.post(url, headers=api.headers(bob))
    again = await client.post(url, headers=api.headers(bob))
    unliked = await client.delete(url, headers=api.headers(bob))

    assert liked.json()["like_count"] == 1
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_LIKED"
    assert unliked.json()["like_count"] == 0
    assert unliked.json()["likes"] == []


async def test_saved_pins_listing(client, api):
    alice = await api.register("alice")
    bob = await api.register("bob")
    board = await api.board(alice)
    first = await api.pin(alice, board, "first")
    await api.pin(alice, board, "second")
    await client.post(f"{API}/pins/{first['_id']}/save", headers=api.headers(bob))

    resp = await client.get(f"{API}/pins/saved", headers=api.headers(bob))

    assert resp.status_code == 200
    assert resp.json()["total"] == 1
    assert resp.json()["items"][0]["title"] == "first"


async def test_private_pin_access(client, api):
    owner = await api.register("owner")
    helper = await api.register("helper")
    outsider = await api.register("outsider")
    board = await api.board(owner, "Private", privacy="private")
    await client.post(
        f"{API}/boards/{board['_id']}/collaborators",
        json={"username": "helper"},
        headers=api.headers(owner),
    )
    pin = await api.pin(owner, board)
    url = f"{API}/pins/{pin['_id']}"

    assert pin["is_private"] is True
    assert (await client.get(url, headers=api.headers(owner))).status_code == 200
    assert (await client.get(url, headers=api.headers(helper))).status_code == 200
    assert (await client.get(url, headers=api.headers(outsider))).status_code == 403
    assert (await client.post(f"{url}/save", headers=api.headers(outsider))).status_code == 403


async def test_get_pin_records_view(client, api, db):
    alice = await api.register("alice")
    pin = await api.pin(alice, await api.board(alice))
    url = f"{API}/pins/{pin['_id']}"

    await client.get(url, headers={"User-Agent": "Mozilla/5.0 (iPad; CPU OS 17_0)"})
    resp = await client.get(
        f"{url}?view_duration=12",
        headers={"User-Agent": "Mozilla/5.0 (X11; Linux x86_64)", "X-Forwarded-For": "10.0.0.7"},
    )

    body = resp.json()
    assert body["views"] == 2
    assert body["view_duration"] == 12
    assert body["device_types"]["tablet"] == 1
    assert body["device_types"]["desktop"] == 1
    assert body["device_types"]["mobile"] == 0
    assert body["locations"]["10_0_0_7"] == 1


async def test_click_counter(client, api):
    alice = await api.register("alice")
    pin = await api.pin(alice, await api.board(alice))

    first = await client.put(f"{API}/pins/{pin['_id']}/click")
    second = await client.put(f"{API}/pins/{pin['_id']}/click")

    assert first.json() == {"clicks": 1}
    assert second.json() == {"clicks": 2}


async def test_update_pin_partial(client, api):
    alice = await api.register("alice")
    bob = await api.register("bob")
    pin = await api.pin(alice, await api.board(alice), "Original", description="keep me")
    url = f"{API}/pins/{pin['_id']}"

    denied = await client.put(url, json={"title": "Hijacked"}, headers=api.headers(bob))
    resp = await client.put(url, json={"title": "Renamed"}, headers=api.headers(alice))

    assert denied.status_code == 403
    assert resp.status_code == 200
    assert resp.json()["title"] == "Renamed"
    assert resp.json()["description"] == "keep me"


async def test_update_pin_board_moves_it(client, api):
    alice = await api.register("alice")
    first = await api.board(alice, "First")
    second = await api.board(alice, "Second")
    pin = await api.pin(alice, first)

    resp = await client.put(
        f"{API}/pins/{pin['_id']}", json={"board_id": second["_id"]}, headers=api.headers(alice)
    )

    assert resp.json()["board_id"] == second["_id"]
    assert (await client.get(f"{API}/boards/{first['_id']}")).json()["pins"] == []
    assert (await client.get(f"{API}/boards/{second['_id']}")).json()["pins"] == [pin["_id"]]


async def test_delete_pin(client, api, db):
    alice = await api.register("alice")
    bob = await api.register("bob")
    board = await api.board(alice)
    pin = await api.pin(alice, board)
    await client.post(f"{API}/pins/{pin['_id']}/comments", json={"text": "nice"}, headers=api.headers(bob))

    denied = await client.delete(f"{API}/pins/{pin['_id']}", headers=api.headers(bob))
    resp = await client.delete(f"{API}/pins/{pin['_id']}", headers=api.headers(alice))

    assert denied.status_code == 403
    assert resp.status_code == 204
    assert (await client.get(f"{API}/pins/{pin['_id']}")).status_code == 404
    assert (await client.get(f"{API}/boards/{board['_id']}")).json()["pins"] == []
    assert await db.comments.count_documents({}) == 0


async def test_public_pin_listing_by_tag(client, api):
    alice = await api.register("alice")
    board = await api.board(alice)
    secret = await api.board(alice, "Secret", privacy="secret")
    await api.pin(alice, board, "tagged", tags=["cats"])
    await api.pin(alice, board, "untagged")
    await api.pin(alice, secret, "hidden", tags=["cats"])

    everything = await client.get(f"{API}/pins")
    cats = await client.get(f"{API}/pins?tag=cats")

    assert everything.json()["total"] == 2
    assert [p["title"] for p in cats.json()["items"]] == ["tagged"]


def test_device_detection():
    assert detect_device_type("Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) Mobile/15E148") == "tablet"
    assert detect_device_type("Mozilla/5.0 (Linux; Android 14; Tablet)") == "tablet"
    assert detect_device_type("Mozilla/5.0 (Linux; Android 14) Mobile Safari") == "mobile"
    assert detect_device_type("Mozilla/5.0 (Windows NT 10.0; Win64; x64)") == "desktop"
    assert detect_device_type(None) == "desktop"


def test_location_keys_are_field_safe():
    assert location_key("192.168.1.20") == "192_168_1_20"
    assert location_key("$where") == "_where"
    assert location_key(None) == "unknown"
