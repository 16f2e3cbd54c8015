"""Tests for the staff reservation endpoints"""

import pytest
from datetime import datetime, time, timedelta
from httpx import AsyncClient

from app.models.reservation import ReservationStatus


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute))


def booking(day, start=14, end=16, **extra):
    payload = {
        "guest_name": "Ada Lovelace",
        "guest_contact": "ada@example.com",
        "number_of_people": 2,
        "time_from": at(day, start).isoformat(),
        "time_to": at(day, end).isoformat(),
    }
    payload.update(extra)
    return payload


@pytest.mark.asyncio
async def test_manual_reservation_is_confirmed_and_assigned(
    test_restaurant, monday, authenticated_client: AsyncClient
):
    response = await authenticated_client.post(
        f"/restaurants/{test_restaurant.id}/reservations", json=booking(monday)
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "confirmed"
    assert data["table_id"] == "T1"
    assert len(data["confirmation_code"]) == 8


@pytest.mark.asyncio
async def test_third_booking_in_full_window_rejected(
    test_restaurant, monday, authenticated_client: AsyncClient
):
    url = f"/restaurants/{test_restaurant.id}/reservations"

    first = await authenticated_client.post(url, json=booking(monday))
    second = await authenticated_client.post(url, json=booking(monday))
    third = await authenticated_client.post(url, json=booking(monday))

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["table_id"] != second.json()["table_id"]
    assert third.status_code == 409
    assert "fully booked" in third.json()["detail"]


@pytest.mark.asyncio
async def test_back_to_back_bookings_fit(test_restaurant, monday, authenticated_client: AsyncClient):
    url = f"/restaurants/{test_restaurant.id}/reservations"

    for start in (10, 12, 14, 16):
        response = await authenticated_client.post(
            url, json=booking(monday, start, start + 2, table_id="T1")
        )
        assert response.status_code == 201


@pytest.mark.asyncio
async def test_selected_table_conflicts(
    test_restaurant, monday, make_reservation, authenticated_client: AsyncClient
):
    await make_reservation(at(monday, 15), at(monday, 17), table_id="T2")
    url = f"/restaurants/{test_restaurant.id}/reservations"

    taken = await authenticated_client.post(url, json=booking(monday, table_id="T2"))
    assert taken.status_code == 409
    assert taken.json()["detail"] == "The selected table is not available at this time."

    unknown = await authenticated_client.post(url, json=booking(monday, table_id="T9"))
    assert unknown.status_code == 409
    assert unknown.json()["detail"] == "Invalid table ID"


@pytest.mark.asyncio
async def test_end_before_start_rejected(test_restaurant, monday, authenticated_client: AsyncClient):
    response = await authenticated_client.post(
        f"/restaurants/{test_restaurant.id}/reservations", json=booking(monday, 16, 14)
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "End time must be after start time"


@pytest.mark.asyncio
async def test_manual_booking_requires_opening_hours(
    test_restaurant, monday, authenticated_client: AsyncClient
):
    hours = [{"day_of_week": day, "is_open": False} for day in range(7)]
    response = await authenticated_client.put(
        f"/restaurants/{test_restaurant.id}/opening_hours", json={"hours": hours}
    )
    assert response.status_code == 200

    response = await authenticated_client.post(
        f"/restaurants/{test_restaurant.id}/reservations", json=booking(monday)
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_edit_revalidates_against_other_bookings(
    test_restaurant, monday, make_reservation, authenticated_client: AsyncClient
):
    await make_reservation(at(monday, 18), at(monday, 20), table_id="T2")
    reservation = await make_reservation(at(monday, 14), at(monday, 16), table_id="T1")
    url = f"/restaurants/{test_restaurant.id}/reservations/{reservation.id}"

    # unchanged interval on its own table does not collide with itself
    response = await authenticated_client.patch(url, json={"number_of_people": 4})
    assert response.status_code == 200
    assert response.json()["number_of_people"] == 4

    response = await authenticated_client.patch(
        url,
        json={
            "time_from": at(monday, 19).isoformat(),
            "time_to": at(monday, 21).isoformat(),
            "table_id": "T2",
        },
    )
    assert response.status_code == 409

    response = await authenticated_client.patch(
        url,
        json={
            "time_from": at(monday, 19).isoformat(),
            "time_to": at(monday, 21).isoformat(),
        },
    )
    assert response.status_code == 200
    assert response.json()["table_id"] == "T1"


@pytest.mark.asyncio
async def test_edit_rejects_null_required_field(
    test_restaurant, monday, make_reservation, authenticated_client: AsyncClient
):
    reservation = await make_reservation(at(monday, 14), at(monday, 16))

    response = await authenticated_client.patch(
        f"/restaurants/{test_restaurant.id}/reservations/{reservation.id}",
        json={"time_from": None},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cancelling_frees_capacity(
    test_restaurant, monday, make_reservation, authenticated_client: AsyncClient
):
    first = await make_reservation(at(monday, 14), at(monday, 16))
    await make_reservation(at(monday, 14), at(monday, 16))
    url = f"/restaurants/{test_restaurant.id}/reservations"

    assert (await authenticated_client.post(url, json=booking(monday))).status_code == 409

    response = await authenticated_client.delete(f"{url}/{first.id}")
    assert response.status_code == 204

    assert (await authenticated_client.post(url, json=booking(monday))).status_code == 201


@pytest.mark.asyncio
async def test_approve_and_decline_pending(
    test_restaurant, monday, make_reservation, authenticated_client: AsyncClient
):
    to_approve = await make_reservation(at(monday, 12), at(monday, 14), status=ReservationStatus.PENDING)
    to_decline = await make_reservation(at(monday, 18), at(monday, 20), status=ReservationStatus.PENDING)
    url = f"/restaurants/{test_restaurant.id}/reservations"

    response = await authenticated_client.post(f"{url}/{to_approve.id}/approve")
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"
    assert response.json()["confirmation_code"]

    response = await authenticated_client.post(f"{url}/{to_decline.id}/decline")
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"

    response = await authenticated_client.post(f"{url}/{to_approve.id}/approve")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_filters_and_unassigned_count(
    test_restaurant, monday, make_reservation, authenticated_client: AsyncClient
):
    await make_reservation(at(monday, 12), at(monday, 14), table_id="T1")
    await make_reservation(at(monday, 18), at(monday, 20))
    await make_reservation(at(monday + timedelta(days=1), 12), at(monday + timedelta(days=1), 14))
    await make_reservation(at(monday, 19), at(monday, 21), status=ReservationStatus.CANCELLED)
    url = f"/restaurants/{test_restaurant.id}/reservations"

    response = await authenticated_client.get(url, params={"date": monday.isoformat()})
    data = response.json()
    assert response.status_code == 200
    assert data["total"] == 3
    assert [item["time_from"][11:16] for item in data["items"]] == ["12:00", "18:00", "19:00"]
    assert data["unassigned_count"] == 2

    response = await authenticated_client.get(url, params={"unassigned": "true"})
    assert response.json()["total"] == 2

    response = await authenticated_client.get(url, params={"status": "cancelled"})
    assert response.json()["total"] == 1


@pytest.mark.asyncio
async def test_available_tables(
    test_restaurant, monday, make_reservation, authenticated_client: AsyncClient
):
    await make_reservation(at(monday, 14), at(monday, 16), table_id="T2")

    response = await authenticated_client.get(
        f"/restaurants/{test_restaurant.id}/available_tables",
        params={
            "time_from": at(monday, 15).isoformat(),
            "time_to": at(monday, 17).isoformat(),
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["all_tables"] == ["T1", "T2", "T3"]
    assert data["available_tables"] == ["T1", "T3"]
    assert data["occupied_tables"] == ["T2"]
