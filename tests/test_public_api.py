"""Tests for the guest-facing booking endpoints"""

import pytest
from datetime import datetime, time, timedelta
from httpx import AsyncClient
from uuid import uuid4

from app.models.reservation import ReservationInvitation, InvitationStatus
from app.models.restaurant import Restaurant
from app.models.user import User, UserRole


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute))


def guest_booking(day, start=(19, 0), **extra):
    time_from = at(day, *start)
    payload = {
        "guest_name": "Grace Hopper",
        "guest_contact": "+15550102030",
        "number_of_people": 4,
        "time_from": time_from.isoformat(),
        "time_to": (time_from + timedelta(minutes=120)).isoformat(),
    }
    payload.update(extra)
    return payload


async def create_invitation(client: AsyncClient, restaurant_id) -> str:
    response = await client.post(
        f"/restaurants/{restaurant_id}/invitations", json={"guest_contact": "grace@example.com"}
    )
    assert response.status_code == 201
    return response.json()["token"]


@pytest.mark.asyncio
async def test_public_restaurant_config(test_restaurant, client: AsyncClient):
    response = await client.get(f"/public/restaurants/{test_restaurant.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["restaurant_name"] == "Test Restaurant"
    assert data["reservation_duration"] == 120
    assert data["table_layout"] == ["T1", "T2", "T3"]
    assert [entry["day_of_week"] for entry in data["opening_hours"]] == list(range(7))


@pytest.mark.asyncio
async def test_private_restaurant_hidden(test_db, test_restaurant, client: AsyncClient):
    test_restaurant.is_public = False
    await test_db.commit()

    response = await client.get(f"/public/restaurants/{test_restaurant.id}")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_slots_for_open_day(test_restaurant, monday, make_reservation, client: AsyncClient):
    await make_reservation(at(monday, 14), at(monday, 16))
    await make_reservation(at(monday, 14), at(monday, 16))

    response = await client.get(
        f"/public/restaurants/{test_restaurant.id}/slots", params={"date": monday.isoformat()}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["is_open"] is True
    slots = {slot["time"]: slot["available"] for slot in data["slots"]}
    assert min(slots) == "09:00"
    assert max(slots) == "20:00"
    assert slots["12:00"] is True
    assert slots["12:15"] is False
    assert slots["14:00"] is False
    assert slots["16:00"] is True


@pytest.mark.asyncio
async def test_slots_for_closed_day(test_restaurant, saturday, client: AsyncClient):
    response = await client.get(
        f"/public/restaurants/{test_restaurant.id}/slots", params={"date": saturday.isoformat()}
    )

    data = response.json()
    assert data["is_open"] is False
    assert data["slots"] == []


@pytest.mark.asyncio
async def test_exceptional_closure_removes_slots(
    test_restaurant, monday, authenticated_client: AsyncClient
):
    response = await authenticated_client.post(
        f"/restaurants/{test_restaurant.id}/exceptional_dates",
        json={"date": monday.isoformat(), "is_open": False, "note": "Private event"},
    )
    assert response.status_code == 200

    response = await authenticated_client.get(
        f"/public/restaurants/{test_restaurant.id}/slots", params={"date": monday.isoformat()}
    )
    assert response.json()["is_open"] is False

    availability = await authenticated_client.get(f"/public/restaurants/{test_restaurant.id}")
    assert availability.json()["exceptional_dates"][0]["note"] == "Private event"


@pytest.mark.asyncio
async def test_invitation_booking_is_single_use(
    test_restaurant, monday, authenticated_client: AsyncClient
):
    token = await create_invitation(authenticated_client, test_restaurant.id)

    response = await authenticated_client.get("/public/availability", params={"token": token})
    assert response.status_code == 200
    assert response.json()["restaurant_id"] == str(test_restaurant.id)

    response = await authenticated_client.post(
        "/public/reservations", json=guest_booking(monday, invitation_token=token)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["requires_approval"] is True
    assert data["reservation"]["status"] == "pending"
    assert data["reservation"]["table_id"] == "T1"

    response = await authenticated_client.post(
        "/public/reservations", json=guest_booking(monday, start=(20, 0), invitation_token=token)
    )
    assert response.status_code == 400

    response = await authenticated_client.get("/public/availability", params={"token": token})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_and_expired_invitations(test_db, test_restaurant, client: AsyncClient):
    response = await client.get("/public/availability", params={"token": "does-not-exist"})
    assert response.status_code == 404

    expired = ReservationInvitation(
        restaurant_id=test_restaurant.id,
        token="expired-token",
        status=InvitationStatus.PENDING.value,
        expires_at=datetime.now() - timedelta(days=1),
    )
    test_db.add(expired)
    await test_db.commit()

    response = await client.get("/public/availability", params={"token": "expired-token"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_auto_confirmed_public_booking(
    test_restaurant, monday, authenticated_client: AsyncClient
):
    response = await authenticated_client.patch(
        f"/restaurants/{test_restaurant.id}/config", json={"auto_confirm_reservations": True}
    )
    assert response.status_code == 200

    response = await authenticated_client.post(
        "/public/reservations", json=guest_booking(monday, restaurant_id=str(test_restaurant.id))
    )

    assert response.status_code == 201
    data = response.json()
    assert data["requires_approval"] is False
    assert data["reservation"]["status"] == "confirmed"


@pytest.mark.asyncio
async def test_public_booking_outside_slots_rejected(
    test_restaurant, monday, saturday, client: AsyncClient
):
    restaurant_id = str(test_restaurant.id)

    off_grid = await client.post(
        "/public/reservations", json=guest_booking(monday, start=(19, 7), restaurant_id=restaurant_id)
    )
    assert off_grid.status_code == 400

    too_late = await client.post(
        "/public/reservations", json=guest_booking(monday, start=(21, 0), restaurant_id=restaurant_id)
    )
    assert too_late.status_code == 400

    closed = await client.post(
        "/public/reservations", json=guest_booking(saturday, restaurant_id=restaurant_id)
    )
    assert closed.status_code == 400


@pytest.mark.asyncio
async def test_public_booking_respects_capacity(
    test_restaurant, monday, make_reservation, client: AsyncClient
):
    await make_reservation(at(monday, 19), at(monday, 21))
    await make_reservation(at(monday, 19), at(monday, 21))

    response = await client.post(
        "/public/reservations", json=guest_booking(monday, restaurant_id=str(test_restaurant.id))
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_public_booking_needs_restaurant_or_token(monday, client: AsyncClient):
    response = await client.post("/public/reservations", json=guest_booking(monday))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_guest_table_choice_still_counts_against_ceiling(
    test_restaurant, monday, make_reservation, authenticated_client: AsyncClient
):
    await make_reservation(at(monday, 19), at(monday, 21), table_id="T1")
    await make_reservation(at(monday, 19), at(monday, 21), table_id="T2")

    response = await authenticated_client.post(
        "/public/reservations",
        json=guest_booking(monday, restaurant_id=str(test_restaurant.id), table_id="T3"),
    )
    assert response.status_code == 409

    staff = await authenticated_client.post(
        f"/restaurants/{test_restaurant.id}/reservations",
        json={
            "guest_name": "Walk In",
            "guest_contact": "+15550009999",
            "number_of_people": 2,
            "time_from": at(monday, 19).isoformat(),
            "time_to": at(monday, 21).isoformat(),
            "table_id": "T3",
        },
    )
    assert staff.status_code == 201


@pytest.mark.asyncio
async def test_guest_booking_length_follows_reservation_duration(
    test_restaurant, monday, client: AsyncClient
):
    restaurant_id = str(test_restaurant.id)

    short = guest_booking(monday, restaurant_id=restaurant_id)
    short["time_to"] = at(monday, 19, 1).isoformat()
    response = await client.post("/public/reservations", json=short)
    assert response.status_code == 400

    derived = guest_booking(monday, restaurant_id=restaurant_id)
    del derived["time_to"]
    response = await client.post("/public/reservations", json=derived)
    assert response.status_code == 201
    assert response.json()["reservation"]["time_to"] == at(monday, 21).isoformat()


@pytest.mark.asyncio
async def test_guest_booking_start_must_be_on_the_minute(
    test_restaurant, monday, client: AsyncClient
):
    payload = guest_booking(monday, restaurant_id=str(test_restaurant.id))
    payload["time_from"] = (at(monday, 19) + timedelta(seconds=30)).isoformat()

    response = await client.post("/public/reservations", json=payload)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_invitation_with_reservation_cannot_book_again(
    test_db, test_restaurant, monday, make_reservation, client: AsyncClient
):
    invitation = ReservationInvitation(
        restaurant_id=test_restaurant.id,
        token="pending-token",
        status=InvitationStatus.PENDING.value,
        expires_at=datetime.now() + timedelta(days=7),
    )
    test_db.add(invitation)
    await test_db.commit()

    reservation = await make_reservation(at(monday, 12), at(monday, 14))
    reservation.invitation_id = invitation.id
    await test_db.commit()

    response = await client.post(
        "/public/reservations", json=guest_booking(monday, invitation_token="pending-token")
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "A reservation already exists for this invitation"


@pytest.mark.asyncio
async def test_invitation_floor_plans(test_restaurant, authenticated_client: AsyncClient):
    token = await create_invitation(authenticated_client, test_restaurant.id)

    response = await authenticated_client.get("/public/floor_plans", params={"token": token})
    assert response.status_code == 200
    assert response.json()["has_visual_layout"] is False
    assert response.json()["floor_plans"] == []

    for name, table_id in [("Terrace", "G1"), ("Main Room", "T1")]:
        await authenticated_client.post(
            f"/restaurants/{test_restaurant.id}/floor_plans",
            json={
                "name": name,
                "elements": [{"id": "el-1", "type": "table", "tableId": table_id, "x": 0, "y": 0}],
            },
        )
    await authenticated_client.post(
        f"/restaurants/{test_restaurant.id}/floor_plans",
        json={"name": "Draft", "elements": [], "is_active": False},
    )

    response = await authenticated_client.get("/public/floor_plans", params={"token": token})
    data = response.json()
    assert data["has_visual_layout"] is True
    assert data["restaurant_name"] == "Test Restaurant"
    assert [plan["name"] for plan in data["floor_plans"]] == ["Terrace", "Main Room"]
    assert data["floor_plans"][0]["elements"][0]["tableId"] == "G1"

    response = await authenticated_client.get("/public/floor_plans", params={"token": "nope"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_public_restaurant_listing(test_db, test_restaurant, client: AsyncClient):
    for index, (name, is_public) in enumerate(
        [("Alpha Diner", True), ("Beta Bistro", True), ("Hidden Cellar", False)]
    ):
        owner = User(
            id=uuid4(),
            email=f"owner{index}@example.com",
            hashed_password="not-used",
            role=UserRole.RESTAURANT_OWNER,
            is_active=True,
        )
        test_db.add(owner)
        await test_db.flush()
        test_db.add(Restaurant(id=uuid4(), owner_id=owner.id, name=name, is_public=is_public))
    await test_db.commit()

    response = await client.get("/public/restaurants")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [item["name"] for item in data["items"]] == ["Alpha Diner", "Beta Bistro", "Test Restaurant"]

    response = await client.get("/public/restaurants", params={"page": 2, "page_size": 2})
    data = response.json()
    assert data["page"] == 2
    assert [item["name"] for item in data["items"]] == ["Test Restaurant"]

    response = await client.get("/public/restaurants", params={"search": "bist"})
    assert [item["name"] for item in response.json()["items"]] == ["Beta Bistro"]
