"""
HTTP API tests — stairs and materials routers.

Tests:
1-2. Health and options catalogues
3-7. Estimate endpoint: success, typed 400 errors
8.   Slabs endpoint
9-11. Material price table: seed, patch, prices flow into estimates
"""

import json

from stairworks import models


def _basic_body():
    return {
        "total_height": 77,
        "total_width": 120,
        "step_tread": 30,
        "step_height": 15,
        "slab_thickness_top": 2,
        "slab_thickness_side": 2,
        "slab_thickness_front": 2,
        "overhang_front": 2,
        "overhang_side": 3,
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["app"] == "stairworks"


def test_options(client):
    data = client.get("/api/stairs/options").json()
    assert [m["id"] for m in data["materials"]] == ["blocks4", "blocks7", "bricks"]
    assert data["slab_sizes"] == ["90x60", "60x60", "60x30", "30x30"]
    assert data["gap_options_mm"] == [2, 3, 4, 5]
    assert data["slab_placements"] == ["longWay", "sideWays"]
    assert data["slab_cutting"] == ["oneCut", "twoCuts"]
    assert data["job_types"] == ["stairs", "stair_slabs"]


def test_estimate(client):
    response = client.post("/api/stairs/estimate", json=_basic_body())
    assert response.status_code == 200
    data = response.json()
    assert data["job_type"] == "stairs"
    assert data["total_steps"] == 5
    assert data["slabs"] is None


def test_missing_measurement_is_400(client):
    body = _basic_body()
    del body["total_height"]
    response = client.post("/api/stairs/estimate", json=body)
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "MissingMeasurement"
    assert detail["field"] == "total_height"


def test_nan_measurement_is_400(client):
    """A raw NaN in the JSON body is a missing measurement, not a server error."""
    body = _basic_body()
    body["total_height"] = float("nan")
    response = client.post(
        "/api/stairs/estimate",
        content=json.dumps(body),
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["error"] == "MissingMeasurement"
    assert detail["field"] == "total_height"


def test_unknown_step_config_is_400(client):
    body = _basic_body()
    body["step_config"] = "sideways"
    response = client.post("/api/stairs/estimate", json=body)
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "UnknownOption"


def test_invalid_width_is_400(client):
    body = _basic_body()
    body["total_width"] = 8
    response = client.post("/api/stairs/estimate", json=body)
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "InvalidStepWidth"


def test_slabs_endpoint(client):
    body = _basic_body()
    body.update(slab_size="60x60", slab_cutting="twoCuts", slab_gap_mm=4)
    response = client.post("/api/stairs/slabs", json=body)
    assert response.status_code == 200
    slabs = response.json()["slabs"]
    assert slabs["slab_size"] == "60x60"
    assert slabs["cutting"] == "twoCuts"
    assert slabs["total_slabs"] == slabs["total_step_slabs"] + slabs["total_front_slabs"]


def test_seed_and_list(client):
    response = client.get("/api/materials/seed")
    assert response.status_code == 200
    assert response.json()["ok"] is True

    names = [m["name"] for m in client.get("/api/materials/").json()]
    assert "Mortar" in names
    assert "7-inch Blocks" in names

    # seeding twice adds nothing
    assert client.get("/api/materials/seed").json()["added"] == 0


def test_patch_price_used_in_estimate(client, db):
    client.get("/api/materials/seed")
    response = client.patch("/api/materials/7-inch Blocks", json={"price_per_unit": 2.5})
    assert response.status_code == 200
    assert response.json()["price_per_unit"] == 2.5

    row = db.query(models.MaterialPrice).filter(models.MaterialPrice.name == "7-inch Blocks").first()
    assert row.price_per_unit == 2.5

    data = client.post("/api/stairs/estimate", json=_basic_body()).json()
    blocks = next(m for m in data["materials"] if m["name"] == "7-inch Blocks")
    assert blocks["price_per_unit"] == 2.5
    assert blocks["total_price"] == 135.0


def test_patch_unknown_material_is_404(client):
    response = client.patch("/api/materials/Marble", json={"price_per_unit": 10})
    assert response.status_code == 404
