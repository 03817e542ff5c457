"""Boards: privacy, ownership, collaborators and cascading deletes."""
API = "/api"


async def test_create_board(client, api, db):
    alice = await api.register("alice")

    board = await api.board(alice, "Kitchen", description="Warm wood", category="home")

    assert board["name"] == "Kitchen"
    assert board["privacy"] == "public"
    assert board["owner_id"] == alice["id"]
    assert board["owner"]["username"] == "alice"
    assert board["pin_count"] == 0

    stored = await db.users.find_one({"username": "alice"})
    assert stored["total_boards"] == 1


async def test_board_name_is_required(client, api):
    alice = await api.register("alice")

    resp = await client.post(f"{API}/boards", json={"name": ""}, headers=api.headers(alice))

    assert resp.status_code == 400


async def test_private_board_access(client, api):
    owner = await api.register("owner")
    helper = await api.register("helper")
    outsider = await api.register("outsider")
    board = await api.board(owner, "Plans", privacy="private")

    resp = await client.post(
        f"{API}/boards/{board['_id']}/collaborators",
        json={"username": "helper"},
        headers=api.headers(owner),
    )
    assert resp.status_code == 200
    assert resp.json()["collaborators"] == [helper["id"]]

    url = f"{API}/boards/{board['_id']}"
    assert (await client.get(url, headers=api.headers(owner))).status_code == 200
    assert (await client.get(url, headers=api.headers(helper))).status_code == 200

    denied = await client.get(url, headers=api.headers(outsider))
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "ACCESS_DENIED"
    assert (await client.get(url)).status_code == 403


async def test_public_board_is_readable_anonymously(client, api):
    owner = await api.register("owner")
    board = await api.board(owner)

    resp = await client.get(f"{API}/boards/{board['_id']}")

    assert resp.status_code == 200


async def test_unknown_and_malformed_board_ids(client, api):
    user = await api.register("user")

    missing = await client.get(f"{API}/boards/{'0' * 24}", headers=api.headers(user))
    malformed = await client.get(f"{API}/boards/not-an-id", headers=api.headers(user))

    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "BOARD_NOT_FOUND"
    assert malformed.status_code == 400


async def test_only_owner_can_update(client, api):
    owner = await api.register("owner")
    other = await api.register("other")
    board = await api.board(owner, "Mine")

    denied = await client.put(
        f"{API}/boards/{board['_id']}", json={"name": "Theirs"}, headers=api.headers(other)
    )
    assert denied.status_code == 403

    resp = await client.put(
        f"{API}/boards/{board['_id']}", json={"description": "Updated"}, headers=api.headers(owner)
    )
    assert resp.status_code == 200
    assert resp.json()["description"] == "Updated"
    assert resp.json()["name"] == "Mine"


async def test_privacy_change_is_mirrored_on_pins(client, api, db):
    owner = await api.register("owner")
    board = await api.board(owner)
    pin = await api.pin(owner, board)
    assert pin["is_private"] is False

    resp = await client.put(
        f"{API}/boards/{board['_id']}", json={"privacy": "secret"}, headers=api.headers(owner)
    )

    assert resp.status_code == 200
    assert resp.json()["privacy"] == "secret"
    stored = await db.pins.find_one({"title": pin["title"]})
    assert stored["is_private"] is True


async def test_delete_board_cascades(client, api, db):
    owner = await api.register("owner")
    board = await api.board(owner, "Doomed")
    keep = await api.board(owner, "Keeper")
    doomed_pin = await api.pin(owner, board, "doomed")
    await api.pin(owner, board, "also doomed")
    kept_pin = await api.pin(owner, keep, "kept")
    await client.post(
        f"{API}/pins/{doomed_pin['_id']}/comments", json={"text": "bye"}, headers=api.headers(owner)
    )

    resp = await client.delete(f"{API}/boards/{board['_id']}", headers=api.headers(owner))

    assert resp.status_code == 204
    assert await db.boards.count_documents({}) == 1
    assert await db.pins.count_documents({"board_id": board["_id"]}) == 0
    assert await db.pins.count_documents({}) == 1
    assert await db.comments.count_documents({}) == 0
    assert (await client.get(f"{API}/pins/{kept_pin['_id']}")).status_code == 200


async def test_only_owner_can_delete(client, api, db):
    owner = await api.register("owner")
    other = await api.register("other")
    board = await api.board(owner)

    resp = await client.delete(f"{API}/boards/{board['_id']}", headers=api.headers(other))

    assert resp.status_code == 403
    assert await db.boards.count_documents({}) == 1


async def test_collaborator_rules(client, api):
    owner = await api.register("owner")
    helper = await api.register("helper")
    board = await api.board(owner)
    url = f"{API}/boards/{board['_id']}/collaborators"

    first = await client.post(url, json={"user_id": helper["id"]}, headers=api.headers(owner))
    again = await client.post(url, json={"username": "helper"}, headers=api.headers(owner))
    self_add = await client.post(url, json={"username": "owner"}, headers=api.headers(owner))
    by_helper = await client.post(url, json={"username": "owner"}, headers=api.headers(helper))
    empty = await client.post(url, json={}, headers=api.headers(owner))

    assert first.status_code == 200
    assert again.status_code == 409
    assert self_add.status_code == 400
    assert by_helper.status_code == 403
    assert empty.status_code == 400

    removed = await client.delete(f"{url}/{helper['id']}", headers=api.headers(owner))
    assert removed.status_code == 200
    assert removed.json()["collaborators"] == []

    removed_again = await client.delete(f"{url}/{helper['id']}", headers=api.headers(owner))
    assert removed_again.status_code == 200


async def test_collaborator_can_pin_and_list_shared_boards(client, api):
    owner = await api.register("owner")
    helper = await api.register("helper")
    board = await api.board(owner, "Shared")
    await client.post(
        f"{API}/boards/{board['_id']}/collaborators",
        json={"username": "helper"},
        headers=api.headers(owner),
    )

    pin = await api.pin(helper, board, "from helper")
    assert pin["board_id"] == board["_id"]

    mine = await client.get(f"{API}/boards", headers=api.headers(helper))
    assert [b["name"] for b in mine.json()] == ["Shared"]

    pins = await client.get(f"{API}/boards/{board['_id']}/pins")
    assert pins.json()["total"] == 1
    assert pins.json()["items"][0]["title"] == "from helper"


async def test_move_pin_between_boards(client, api):
    owner = await api.register("owner")
    first = await api.board(owner, "First")
    second = await api.board(owner, "Second", privacy="private")
    pin = await api.pin(owner, first)

    resp = await client.post(
        f"{API}/boards/{second['_id']}/pins", json={"pin_id": pin["_id"]}, headers=api.headers(owner)
    )

    assert resp.status_code == 200
    assert resp.json()["pins"] == [pin["_id"]]

    old = await client.get(f"{API}/boards/{first['_id']}", headers=api.headers(owner))
    assert old.json()["pins"] == []

    moved = await client.get(f"{API}/pins/{pin['_id']}", headers=api.headers(owner))
    assert moved.json()["board_id"] == second["_id"]
    assert moved.json()["is_private"] is True


async def test_cannot_move_someone_elses_pin(client, api):
    owner = await api.register("owner")
    other = await api.register("other")
    board = await api.board(owner)
    other_board = await api.board(other)
    pin = await api.pin(owner, board)

    resp = await client.post(
        f"{API}/boards/{other_board['_id']}/pins",
        json={"pin_id": pin["_id"]},
        headers=api.headers(other),
    )

    assert resp.status_code == 403


async def test_remove_pin_from_board_deletes_it(client, api, db):
    owner = await api.register("owner")
    board = await api.board(owner)
    pin = await api.pin(owner, board)
    await client.post(
        f"{API}/pins/{pin['_id']}/comments", json={"text": "nice"}, headers=api.headers(owner)
    )

    resp = await client.delete(
        f"{API}/boards/{board['_id']}/pins/{pin['_id']}", headers=api.headers(owner)
    )

    assert resp.status_code == 204
    assert await db.pins.count_documents({}) == 0
    assert await db.comments.count_documents({}) == 0
    stored = await client.get(f"{API}/boards/{board['_id']}", headers=api.headers(owner))
    assert stored.json()["pins"] == []


async def test_remove_pin_from_board_rules(client, api, db):
    owner = await api.register("owner")
    other = await api.register("other")
    board = await api.board(owner)
    elsewhere = await api.board(owner, "Elsewhere")
    pin = await api.pin(owner, board)

    not_owner = await client.delete(
        f"{API}/boards/{board['_id']}/pins/{pin['_id']}", headers=api.headers(other)
    )
    wrong_board = await client.delete(
        f"{API}/boards/{elsewhere['_id']}/pins/{pin['_id']}", headers=api.headers(owner)
    )
    anonymous = await client.delete(f"{API}/boards/{board['_id']}/pins/{pin['_id']}")

    assert not_owner.status_code == 403
    assert wrong_board.status_code == 404
    assert anonymous.status_code == 401
    assert await db.pins.count_documents({}) == 1


async def test_user_boards_respect_privacy(client, api):
    owner = await api.register("owner")
    other = await api.register("other")
    await api.board(owner, "Open")
    await api.board(owner, "Hidden", privacy="secret")

    theirs = await client.get(f"{API}/profile/owner/boards", headers=api.headers(other))
    own = await client.get(f"{API}/profile/owner/boards", headers=api.headers(owner))

    assert [b["name"] for b in theirs.json()] == ["Open"]
    assert sorted(b["name"] for b in own.json()) == ["Hidden", "Open"]
