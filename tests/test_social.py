"""Follow graph."""
API = "/api"


async def test_follow_updates_both_sides(client, api):
    alice = await api.register("alice")
    bob = await api.register("bob")

    resp = await client.post(f"{API}/profile/alice/follow", headers=api.headers(bob))

    assert resp.status_code == 200
    assert resp.json()["followers"] == 1

    alice_me = await api.me(alice)
    bob_me = await api.me(bob)
    assert alice_me["followers"] == [bob["id"]]
    assert bob_me["following"] == [alice["id"]]


async def test_cannot_follow_self(client, api):
    alice = await api.register("alice")

    resp = await client.post(f"{API}/profile/alice/follow", headers=api.headers(alice))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_OPERATION"
    assert alice["id"] not in (await api.me(alice))["following"]


async def test_double_follow_conflicts(client, api, caplog):
    alice = await api.register("alice")
    bob = await api.register("bob")
    await api.follow(bob, alice)

    resp = await client.post(f"{API}/profile/alice/follow", headers=api.headers(bob))

    assert resp.status_code == 409
    assert (await api.me(alice))["followers"] == [bob["id"]]
    assert "running compensations" not in caplog.text


async def test_follow_then_unfollow_restores_lists(client, api):
    alice = await api.register("alice")
    bob = await api.register("bob")
    before_alice = await api.me(alice)
    before_bob = await api.me(bob)

    await api.follow(bob, alice)
    resp = await client.post(f"{API}/profile/alice/unfollow", headers=api.headers(bob))

    assert resp.status_code == 200
    assert resp.json()["followers"] == 0
    assert (await api.me(alice))["followers"] == before_alice["followers"]
    assert (await api.me(bob))["following"] == before_bob["following"]


async def test_unfollow_is_idempotent(client, api):
    await api.register("alice")
    bob = await api.register("bob")

    for _ in range(2):
        resp = await client.post(f"{API}/profile/alice/unfollow", headers=api.headers(bob))
        assert resp.status_code == 200
        assert resp.json()["followers"] == 0


async def test_follow_unknown_user(client, api):
    bob = await api.register("bob")

    resp = await client.post(f"{API}/profile/nobody/follow", headers=api.headers(bob))

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "USER_NOT_FOUND"


async def test_follow_requires_auth(client, api):
    await api.register("alice")

    resp = await client.post(f"{API}/profile/alice/follow")

    assert resp.status_code == 401


async def test_follow_refreshes_target_activity(client, api, db):
    target = await api.register("popular")
    await db.users.update_one({"username": "popular"}, {"$set": {"total_pins": 200}})

    follower = await api.register("fan")
    await api.follow(follower, target)

    stored = await db.users.find_one({"username": "popular"})
    assert stored["activity_score"] == 60.3
    assert stored["segment"] == "creator"


async def test_profile_shows_follow_state_and_stats(client, api):
    alice = await api.register("alice")
    bob = await api.register("bob")
    board = await api.board(alice, "Public")
    secret = await api.board(alice, "Secret", privacy="secret")
    await api.pin(alice, board, "visible")
    await api.pin(alice, secret, "hidden")
    await api.follow(bob, alice)

    resp = await client.get(f"{API}/profile/alice", headers=api.headers(bob))

    assert resp.status_code == 200
    body = resp.json()
    assert body["is_following"] is True
    assert body["stats"] == {"pins": 1, "boards": 1, "followers": 1, "following": 0}
    assert body["user"]["email"] is None

    own = await client.get(f"{API}/profile/alice", headers=api.headers(alice))
    assert own.json()["stats"]["pins"] == 2
    assert own.json()["stats"]["boards"] == 2
    assert own.json()["user"]["email"] == "alice@example.com"

    anonymous = await client.get(f"{API}/profile/alice")
    assert anonymous.json()["is_following"] is False
