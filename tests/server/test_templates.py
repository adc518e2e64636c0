def _placement(pid="a", **overrides):
    data = {
        "id": pid,
        "fieldKey": "name",
        "pageIndex": 0,
        "rect": {"x": 0.1, "y": 0.2, "w": 0.25, "h": 0.04},
    }
    data.update(overrides)
    return data


def test_get_placements_empty(client):
    resp = client.get("/api/templates/tpl/placements")
    assert resp.status_code == 200
    assert resp.json() == {"placements": []}


def test_put_then_get(client):
    resp = client.put("/api/templates/tpl/placements", json={"placements": [_placement()]})
    assert resp.status_code == 200

    saved = client.get("/api/templates/tpl/placements").json()["placements"]
    assert len(saved) == 1
    assert saved[0]["id"] == "a"
    assert saved[0]["rect"] == {"x": 0.1, "y": 0.2, "w": 0.25, "h": 0.04}


def test_put_fills_defaults_and_clamps(client):
    body = {"placements": [_placement(rect={"x": -0.5, "y": 1.5, "w": 2, "h": 0.1}, label=None)]}
    placement = client.put("/api/templates/tpl/placements", json=body).json()["placements"][0]
    assert placement["rect"] == {"x": 0.0, "y": 1.0, "w": 1.0, "h": 0.1}
    assert placement["label"] == ""
    assert placement["style"] == {
        "fontSize": 12, "align": "left", "multiline": False, "lineHeight": 14,
    }


def test_put_replaces_previous(client):
    client.put("/api/templates/tpl/placements", json={"placements": [_placement("a")]})
    client.put("/api/templates/tpl/placements", json={"placements": [_placement("b")]})

    saved = client.get("/api/templates/tpl/placements").json()["placements"]
    assert [p["id"] for p in saved] == ["b"]


def test_put_rejects_duplicate_ids(client):
    body = {"placements": [_placement("a"), _placement("a")]}
    resp = client.put("/api/templates/tpl/placements", json=body)
    assert resp.status_code == 400
    assert client.get("/api/templates/tpl/placements").json() == {"placements": []}


def test_put_rejects_missing_id(client):
    placement = _placement()
    del placement["id"]
    resp = client.put("/api/templates/tpl/placements", json={"placements": [placement]})
    assert resp.status_code == 400


def test_put_rejects_bad_align(client):
    body = {"placements": [_placement(style={"align": "justify"})]}
    resp = client.put("/api/templates/tpl/placements", json=body)
    assert resp.status_code == 422


def test_templates_are_listed(client):
    client.put("/api/templates/b/placements", json={"placements": []})
    client.put("/api/templates/a/placements", json={"placements": [_placement()]})
    assert client.get("/api/templates").json() == {"templates": ["a", "b"]}


def test_root(client):
    assert client.get("/").json()["status"] == "ok"


def test_no_cross_origin_headers(client):
    resp = client.get("/api/templates", headers={"Origin": "http://localhost:5173"})
    assert resp.status_code == 200
    assert "access-control-allow-origin" not in resp.headers
