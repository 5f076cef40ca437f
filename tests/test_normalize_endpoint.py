def test_healthz(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_normalize_posts(client, blog_definitions, posts, normalized_posts):
    r = client.post("/normalize", json={
        "schemas": blog_definitions, "entity": "posts", "many": True, "data": posts,
    })
    assert r.status_code == 200, r.text
    assert r.json() == normalized_posts


def test_denormalize_round_trip(client, blog_definitions, posts):
    r = client.post("/normalize", json={
        "schemas": blog_definitions, "entity": "posts", "many": True, "data": posts,
    })
    body = r.json()
    r2 = client.post("/denormalize", json={
        "schemas": blog_definitions, "entity": "posts", "many": True,
        "result": body["result"], "entities": body["entities"],
    })
    assert r2.status_code == 200, r2.text
    assert r2.json() == {"data": posts}


def test_denormalize_missing_entity(client, blog_definitions):
    r = client.post("/denormalize", json={
        "schemas": blog_definitions, "entity": "posts", "result": 3, "entities": {"posts": {}},
    })
    assert r.status_code == 404
    assert "posts" in r.json()["detail"]


def test_unknown_relation_target(client):
    r = client.post("/normalize", json={
        "schemas": [{"name": "posts", "relations": {"author": {"target": "authors"}}}],
        "entity": "posts", "data": {"id": 1},
    })
    assert r.status_code == 400


def test_unknown_entity(client, blog_definitions):
    r = client.post("/normalize", json={"schemas": blog_definitions, "entity": "videos", "data": {"id": 1}})
    assert r.status_code == 400


def test_unknown_merge_strategy(client, blog_definitions, posts):
    r = client.post("/normalize", json={
        "schemas": blog_definitions, "entity": "posts", "many": True, "data": posts,
        "merge_strategy": "newest",
    })
    assert r.status_code == 400


def test_strict_merge_conflict(client, blog_definitions):
    data = [
        {"id": 1, "author": {"id": 7, "nick": "old"}},
        {"id": 2, "author": {"id": 7, "nick": "new"}},
    ]
    r = client.post("/normalize", json={
        "schemas": blog_definitions, "entity": "posts", "many": True, "data": data,
        "merge_strategy": "strict",
    })
    assert r.status_code == 409


def test_shape_mismatch(client, blog_definitions, posts):
    r = client.post("/normalize", json={
        "schemas": blog_definitions, "entity": "posts", "many": False, "data": posts,
    })
    assert r.status_code == 422
    assert "list" in r.json()["detail"]


def test_missing_id(client, blog_definitions):
    r = client.post("/normalize", json={
        "schemas": blog_definitions, "entity": "posts", "data": {"author": {"id": 1}},
    })
    assert r.status_code == 422
