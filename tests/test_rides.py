import pytest

from carpool.service import booking

from conftest import auth_header, register

RIDE = {
    "origin": "Ahmedabad",
    "destination": "Surat",
    "date": "2030-02-01",
    "time": "07:45",
    "seatsAvailable": 3,
    "price": 250.5,
    "description": "AC car, no smoking",
}


def _post_ride(client, token, **overrides):
    payload = dict(RIDE, **overrides)
    return client.post("/api/rides", json=payload, headers=auth_header(token))


def test_create_ride(client):
    token, driver = register(client)
    response = _post_ride(client, token)
    assert response.status_code == 201
    ride = response.json()
    assert ride["driver"] == {"id": driver["id"], "name": driver["name"], "email": driver["email"]}
    assert ride["status"] == "active"
    assert ride["passengers"] == []
    assert ride["seatsAvailable"] == 3
    assert ride["price"] == 250.5
    assert ride["date"] == "2030-02-01"
    assert ride["time"] == "07:45"


def test_create_ride_requires_token(client):
    assert client.post("/api/rides", json=RIDE).status_code == 401


@pytest.mark.parametrize("overrides", [
    {"seatsAvailable": 0},
    {"seatsAvailable": -2},
    {"price": 0},
    {"price": -10},
    {"origin": ""},
    {"date": "not-a-date"},
])
def test_create_ride_validation(client, overrides):
    token, _ = register(client)
    response = _post_ride(client, token, **overrides)
    assert response.status_code == 400
    assert "message" in response.json()


def test_create_ride_missing_field(client):
    token, _ = register(client)
    payload = dict(RIDE)
    del payload["destination"]
    response = client.post("/api/rides", json=payload, headers=auth_header(token))
    assert response.status_code == 400


def test_list_and_get_rides(client):
    token, _ = register(client)
    first = _post_ride(client, token).json()
    _post_ride(client, token, origin="Pune", destination="Mumbai")

    rides = client.get("/api/rides").json()
    assert [ride["origin"] for ride in rides] == ["Ahmedabad", "Pune"]

    response = client.get(f"/api/rides/{first['id']}")
    assert response.status_code == 200
    assert response.json()["description"] == "AC car, no smoking"

    response = client.get("/api/rides/999")
    assert response.status_code == 404
    assert response.json() == {"message": "Ride not found"}


def test_search_is_case_insensitive_substring(client):
    token, _ = register(client)
    _post_ride(client, token)
    _post_ride(client, token, origin="Pune", destination="Mumbai")
    _post_ride(client, token, origin="Rajkot", destination="Ahmedabad")

    rides = client.get("/api/rides/search", params={"origin": "a"}).json()
    assert {ride["origin"] for ride in rides} == {"Ahmedabad", "Rajkot"}

    rides = client.get("/api/rides/search", params={"origin": "AHMED"}).json()
    assert [ride["origin"] for ride in rides] == ["Ahmedabad"]

    rides = client.get("/api/rides/search", params={"origin": "pu", "destination": "bai"}).json()
    assert [ride["destination"] for ride in rides] == ["Mumbai"]

    assert len(client.get("/api/rides/search").json()) == 3
    assert client.get("/api/rides/search", params={"destination": "delhi"}).json() == []


def test_search_treats_wildcards_literally(db, make_user, make_ride):
    driver = make_user()
    make_ride(driver, origin="Ahmedabad")
    make_ride(driver, origin="100% Road")

    assert [ride.origin for ride in booking.search_rides(db, origin="%")] == ["100% Road"]
    assert booking.search_rides(db, origin="_hmed") == []


def test_reviewable_rides(client, db):
    driver_token, driver = register(client, email="driver@example.com")
    rider_token, rider = register(client, name="Rider", email="rider@example.com")

    ids = []
    for _ in range(3):
        ids.append(_post_ride(client, driver_token).json()["id"])
    for ride_id in ids:
        client.post(f"/api/rides/{ride_id}/book", json={"seatsToBook": 2},
                    headers=auth_header(rider_token))

    booking.complete_ride(db, ids[0], driver["id"])
    booking.cancel_ride(db, ids[1], driver["id"])

    response = client.get(f"/api/rides/user/{rider['id']}/reviewable", headers=auth_header(rider_token))
    assert response.status_code == 200
    rides = response.json()
    assert [(ride["id"], ride["userRole"]) for ride in rides] == [(ids[0], "passenger")]

    rides = client.get(f"/api/rides/user/{driver['id']}/reviewable",
                       headers=auth_header(driver_token)).json()
    assert [(ride["id"], ride["userRole"]) for ride in rides] == [(ids[0], "driver")]
    assert [p["id"] for p in rides[0]["passengers"]] == [rider["id"], rider["id"]]

    assert client.get(f"/api/rides/user/{rider['id']}/reviewable").status_code == 401


def test_health_and_unknown_route(client):
    assert client.get("/api/health").json() == {"status": "OK", "message": "Server is running"}

    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {"message": "Route not found"}
