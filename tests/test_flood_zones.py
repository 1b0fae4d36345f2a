def test_create_and_list_zone(client, auth_headers, zone):
    assert zone["is_active"] is True
    assert zone["risk_level"] == "high"
    assert abs(zone["latitude"] - 9.4981) < 1e-6

    r = client.get("/api/flood-zones", headers=auth_headers)
    assert r.status_code == 200
    assert [z["id"] for z in r.json()] == [zone["id"]]


def test_zones_listed_by_last_update(client, auth_headers, zone):
    r = client.post("/api/flood-zones", headers=auth_headers, json={
        "name": "Chengannur", "district": "Alappuzha", "latitude": 9.318, "longitude": 76.611,
        "risk_level": "medium", "radius": 500,
    })
    second = r.json()
    assert [z["id"] for z in client.get("/api/flood-zones", headers=auth_headers).json()] == [second["id"], zone["id"]]

    client.patch(f"/api/flood-zones/{zone['id']}", headers=auth_headers, json={"water_level": 5.2})
    assert client.get("/api/flood-zones", headers=auth_headers).json()[0]["id"] == zone["id"]


def test_invalid_zone_rejected(client, auth_headers):
    r = client.post("/api/flood-zones", headers=auth_headers, json={
        "name": "Nowhere", "district": "X", "latitude": 91, "longitude": 76.3,
        "risk_level": "extreme", "radius": 0,
    })
    assert r.status_code == 422


def test_patch_only_touches_given_fields(client, auth_headers, zone):
    r = client.patch(f"/api/flood-zones/{zone['id']}", headers=auth_headers,
                     json={"risk_level": "low", "is_active": False})
    assert r.status_code == 200
    body = r.json()
    assert body["risk_level"] == "low"
    assert body["is_active"] is False
    assert body["name"] == zone["name"]
    assert body["radius"] == zone["radius"]
    assert body["last_updated"] >= zone["last_updated"]


def test_patch_unknown_zone(client, auth_headers):
    r = client.patch("/api/flood-zones/does-not-exist", headers=auth_headers, json={"risk_level": "low"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Flood zone not found"


def test_patch_rejects_null_required(client, auth_headers, zone):
    r = client.patch(f"/api/flood-zones/{zone['id']}", headers=auth_headers, json={"name": None})
    assert r.status_code == 422


def test_zone_activity_logged(client, auth_headers, zone, current_user_id):
    client.patch(f"/api/flood-zones/{zone['id']}", headers=auth_headers, json={"water_level": 6.1})
    acts = client.get("/api/activities", headers=auth_headers).json()
    assert [a["type"] for a in acts] == ["zone_update", "zone_creation"]
    assert acts[0]["metadata"] == {"water_level": 6.1}
    assert acts[1]["description"] == "Created flood zone: Kuttanad Low Lands"
    assert acts[1]["location"] == "Alappuzha"
    assert all(a["performed_by"] == current_user_id for a in acts)


def test_locate_point_inside_zone(client, auth_headers, zone):
    r = client.get("/api/flood-zones/locate", headers=auth_headers, params={"lat": 9.4985, "lon": 76.3390})
    assert r.status_code == 200
    found = r.json()
    assert len(found) == 1
    assert found[0]["zone"]["id"] == zone["id"]
    assert found[0]["distance_m"] < 100


def test_locate_ignores_far_and_inactive_zones(client, auth_headers, zone):
    r = client.get("/api/flood-zones/locate", headers=auth_headers, params={"lat": 9.55, "lon": 76.3388})
    assert r.json() == []

    client.patch(f"/api/flood-zones/{zone['id']}", headers=auth_headers, json={"is_active": False})
    r = client.get("/api/flood-zones/locate", headers=auth_headers, params={"lat": 9.4981, "lon": 76.3388})
    assert r.json() == []
