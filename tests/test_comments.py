"""Comments."""
API = "/api"


async def test_comment_lifecycle(client, api, db):
    alice = await api.register("alice")
    bob = await api.register("bob")
    pin = await api.pin(alice, await api.board(alice))
    url = f"{API}/pins/{pin['_id']}/comments"

    created = await client.post(url, json={"text": "Lovely"}, headers=api.headers(bob))

    assert created.status_code == 201
    comment = created.json()
    assert comment["text"] == "Lovely"
    assert comment["author_id"] == bob["id"]
    assert comment["author"]["username"] == "bob"

    listed = await client.get(url)
    assert [c["text"] for c in listed.json()] == ["Lovely"]

    pin_now = await client.get(f"{API}/pins/{pin['_id']}")
    assert pin_now.json()["comment_count"] == 1
    assert (await db.users.find_one({"username": "bob"}))["total_comments"] == 1


async def test_comments_are_listed_oldest_first(client, api):
    alice = await api.register("alice")
    pin = await api.pin(alice, await api.board(alice))
    url = f"{API}/pins/{pin['_id']}/comments"

    for text in ("one", "two", "three"):
        await client.post(url, json={"text": text}, headers=api.headers(alice))

    listed = await client.get(url)
    assert [c["text"] for c in listed.json()] == ["one", "two", "three"]


async def test_comment_text_is_validated(client, api):
    alice = await api.register("alice")
    pin = await api.pin(alice, await api.board(alice))
    url = f"{API}/pins/{pin['_id']}/comments"

    empty = await client.post(url, json={"text": "   "}, headers=api.headers(alice))
    too_long = await client.post(url, json={"text": "x" * 501}, headers=api.headers(alice))

    assert empty.status_code == 400
    assert too_long.status_code == 400


async def test_delete_rules(client, api):
    owner = await api.register("owner")
    author = await api.register("author")
    stranger = await api.register("stranger")
    pin = await api.pin(owner, await api.board(owner))
    url = f"{API}/pins/{pin['_id']}/comments"

    by_author = (await client.post(url, json={"text": "mine"}, headers=api.headers(author))).json()
    for_owner = (await client.post(url, json={"text": "theirs"}, headers=api.headers(author))).json()

    denied = await client.delete(f"{API}/comments/{by_author['_id']}", headers=api.headers(stranger))
    assert denied.status_code == 403

    assert (await client.delete(
        f"{API}/comments/{by_author['_id']}", headers=api.headers(author)
    )).status_code == 204
    assert (await client.delete(
        f"{API}/comments/{for_owner['_id']}", headers=api.headers(owner)
    )).status_code == 204

    assert (await client.get(url)).json() == []
    assert (await client.get(f"{API}/pins/{pin['_id']}")).json()["comment_count"] == 0


async def test_delete_missing_comment(client, api):
    user = await api.register("user")

    resp = await client.delete(f"{API}/comments/{'a' * 24}", headers=api.headers(user))

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "COMMENT_NOT_FOUND"


async def test_cannot_comment_on_hidden_pin(client, api):
    owner = await api.register("owner")
    outsider = await api.register("outsider")
    pin = await api.pin(owner, await api.board(owner, "Secret", privacy="secret"))

    resp = await client.post(
        f"{API}/pins/{pin['_id']}/comments", json={"text": "hi"}, headers=api.headers(outsider)
    )

    assert resp.status_code == 403
