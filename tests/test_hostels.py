import pytest


async def setup_room(client, headers, hostel_type="male", name="Nkoyoyo Hall", capacity=2):
    hostel = await client.post(
        "/api/hostels", json={"name": name, "type": hostel_type, "total_rooms": 10}, headers=headers
    )
    assert hostel.status_code == 201, hostel.text
    room = await client.post(
        "/api/hostels/rooms",
        json={"hostel_id": hostel.json()["id"], "room_number": "B12", "capacity": capacity},
        headers=headers,
    )
    assert room.status_code == 201, room.text
    return hostel.json(), room.json()


def occupant(room_id, registration="S23B13/001", access="A12345"):
    return {
        "room_id": room_id,
        "student_name": "Peter Mukasa",
        "registration_number": registration,
        "access_number": access,
        "year_of_study": 2,
        "semester": 1,
    }


@pytest.mark.asyncio
async def test_register_occupant_fills_room(client, male_warden):
    _, room = await setup_room(client, male_warden["headers"], capacity=1)

    res = await client.post("/api/hostels/occupants", json=occupant(room["id"]), headers=male_warden["headers"])
    assert res.status_code == 201, res.text
    assert res.json()["check_out_date"] is None
    assert res.json()["check_in_date"] is not None

    rooms = (await client.get("/api/hostels/rooms", headers=male_warden["headers"])).json()
    assert rooms[0]["current_occupants"] == 1
    assert rooms[0]["status"] == "occupied"


@pytest.mark.asyncio
async def test_active_registration_number_is_unique(client, male_warden):
    _, room = await setup_room(client, male_warden["headers"])

    first = await client.post("/api/hostels/occupants", json=occupant(room["id"]), headers=male_warden["headers"])
    assert first.status_code == 201

    second = await client.post(
        "/api/hostels/occupants",
        json=occupant(room["id"], access="A99999"),
        headers=male_warden["headers"],
    )
    assert second.status_code == 400
    assert second.json()["detail"] == (
        "This registration number is already registered. Each registration number can only be used once."
    )

    active = (await client.get("/api/hostels/occupants?active_only=true", headers=male_warden["headers"])).json()
    assert len(active) == 1


@pytest.mark.asyncio
async def test_registration_number_reusable_after_check_out(client, male_warden):
    _, room = await setup_room(client, male_warden["headers"])

    first = await client.post("/api/hostels/occupants", json=occupant(room["id"]), headers=male_warden["headers"])
    out = await client.post(
        f"/api/hostels/occupants/{first.json()['id']}/check-out", headers=male_warden["headers"]
    )
    assert out.status_code == 200
    assert out.json()["check_out_date"] is not None

    again = await client.post("/api/hostels/occupants", json=occupant(room["id"]), headers=male_warden["headers"])
    assert again.status_code == 201

    twice = await client.post(
        f"/api/hostels/occupants/{first.json()['id']}/check-out", headers=male_warden["headers"]
    )
    assert twice.status_code == 400


@pytest.mark.asyncio
async def test_delete_occupant_frees_place(client, male_warden):
    _, room = await setup_room(client, male_warden["headers"], capacity=1)
    created = await client.post("/api/hostels/occupants", json=occupant(room["id"]), headers=male_warden["headers"])

    res = await client.delete(f"/api/hostels/occupants/{created.json()['id']}", headers=male_warden["headers"])
    assert res.status_code == 200

    rooms = (await client.get("/api/hostels/rooms", headers=male_warden["headers"])).json()
    assert rooms[0]["current_occupants"] == 0
    assert rooms[0]["status"] == "available"


@pytest.mark.asyncio
async def test_wardens_only_see_their_hostel_type(client, admin, male_warden, female_warden):
    male_hostel, male_room = await setup_room(client, male_warden["headers"])
    await setup_room(client, female_warden["headers"], hostel_type="female", name="Sabiiti Hall")

    male_view = (await client.get("/api/hostels", headers=male_warden["headers"])).json()
    assert [h["name"] for h in male_view] == ["Nkoyoyo Hall"]

    female_rooms = (await client.get("/api/hostels/rooms", headers=female_warden["headers"])).json()
    assert all(r["hostel_id"] != male_hostel["id"] for r in female_rooms)

    admin_view = (await client.get("/api/hostels", headers=admin["headers"])).json()
    assert len(admin_view) == 2

    # a female warden cannot place students in a male room
    res = await client.post(
        "/api/hostels/occupants", json=occupant(male_room["id"]), headers=female_warden["headers"]
    )
    assert res.status_code == 404

    # nor delete a hostel outside their scope
    res = await client.delete(f"/api/hostels/{male_hostel['id']}", headers=female_warden["headers"])
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_warden_cannot_create_other_hostel_type(client, male_warden):
    res = await client.post(
        "/api/hostels", json={"name": "Sabiiti Hall", "type": "female"}, headers=male_warden["headers"]
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_hostels_require_login(client, db):
    res = await client.get("/api/hostels")
    assert res.status_code == 401
