from fastapi import status

from booking_api.models.booking import Booking, BookingStatus

from tests.conf_tests import (
    client,
    clear_db,
    future,
    parse,
    test_db,
    recording_sink,
    test_user_id,
    booking_payload,
)


def create_booking(payload):
    response = client.post("/api/bookings/", json=payload)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def approve(booking_id, decision="approved", reason=None):
    body = {"status": decision}
    if reason is not None:
        body["reason"] = reason
    return client.put(f"/api/bookings/{booking_id}/approve", json=body)


# Tests
# pylint: disable-next=redefined-outer-name
def test_create_booking_success(booking_payload):
    response = client.post("/api/bookings/", json=booking_payload)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["id"]
    assert data["room_id"] == booking_payload["room_id"]
    assert data["purpose"] == booking_payload["purpose"]
    assert data["status"] == "pending"
    assert parse(data["end_time"]) > parse(data["start_time"])
    assert data["created_at"]
    assert data["updated_at"] is None


# pylint: disable-next=redefined-outer-name
def test_create_booking_invalid_data():
    response = client.post(
        "/api/bookings/",
        json={"room_id": "room-1", "start_time": "invalid-date", "end_time": "2020-01-01T00:00:00Z"},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    errors = response.json()["detail"]
    assert isinstance(errors, list)
    fields = {error["loc"][-1] for error in errors}
    assert {"user_id", "start_time", "purpose"} <= fields


# pylint: disable-next=redefined-outer-name
def test_create_booking_end_before_start(booking_payload):
    booking_payload["end_time"] = future(days=0, hours=-24).isoformat()
    response = client.post("/api/bookings/", json=booking_payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "End time must be after start time" in response.text


# pylint: disable-next=redefined-outer-name
def test_create_booking_in_the_past(booking_payload):
    booking_payload["start_time"] = future(days=-1).isoformat()
    response = client.post("/api/bookings/", json=booking_payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert "Start time must be in the future" in response.text


# pylint: disable-next=redefined-outer-name
def test_create_booking_rejects_invalid_user_id(booking_payload):
    booking_payload["user_id"] = "not-a-uuid"
    response = client.post("/api/bookings/", json=booking_payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# pylint: disable-next=redefined-outer-name
def test_create_booking_rejects_non_pending_status(booking_payload):
    booking_payload["status"] = "approved"
    response = client.post("/api/bookings/", json=booking_payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# pylint: disable-next=redefined-outer-name
def test_create_booking_attendees_out_of_range(booking_payload):
    booking_payload["attendees"] = 1001
    response = client.post("/api/bookings/", json=booking_payload)
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# pylint: disable-next=redefined-outer-name
def test_overlapping_bookings_are_accepted_at_creation(booking_payload):
    create_booking(booking_payload)
    second = client.post("/api/bookings/", json=booking_payload)
    assert second.status_code == status.HTTP_201_CREATED


# pylint: disable-next=redefined-outer-name
def test_get_bookings(booking_payload):
    created = create_booking(booking_payload)
    response = client.get("/api/bookings/")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == created["id"]


# pylint: disable-next=redefined-outer-name
def test_get_bookings_filtered_by_status(booking_payload):
    first = create_booking(booking_payload)
    create_booking(booking_payload)
    approve(first["id"])

    response = client.get("/api/bookings/", params={"status": "approved"})
    assert response.status_code == status.HTTP_200_OK
    assert [b["id"] for b in response.json()] == [first["id"]]


# pylint: disable-next=redefined-outer-name
def test_get_booking(booking_payload):
    created = create_booking(booking_payload)
    response = client.get(f"/api/bookings/{created['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == created["id"]


def test_get_booking_not_found():
    response = client.get("/api/bookings/non-existent-id")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Booking not found"


# pylint: disable-next=redefined-outer-name
def test_update_booking(booking_payload):
    created = create_booking(booking_payload)
    response = client.put(f"/api/bookings/{created['id']}", json={"purpose": "Updated", "attendees": 12})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["purpose"] == "Updated"
    assert data["attendees"] == 12
    assert data["status"] == "pending"
    assert data["updated_at"] is not None


# pylint: disable-next=redefined-outer-name
def test_update_booking_end_before_existing_start(booking_payload):
    created = create_booking(booking_payload)
    response = client.put(
        f"/api/bookings/{created['id']}",
        json={"end_time": future(days=0, hours=1).isoformat()},
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["detail"] == ["End time must be after start time"]


def test_update_booking_not_found():
    response = client.put("/api/bookings/missing", json={"purpose": "x"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_approve_booking(booking_payload, recording_sink):
    created = create_booking(booking_payload)
    response = approve(created["id"], reason="Approved by the room manager")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "approved"
    assert data["approval_reason"] == "Approved by the room manager"

    assert len(recording_sink.sent) == 1
    sent = recording_sink.sent[0]
    assert sent["kind"] == "approved"
    assert sent["details"]["reason"] == "Approved by the room manager"
    assert sent["email"] == "employee550e8400@example.com"


# pylint: disable-next=redefined-outer-name
def test_reject_booking(booking_payload):
    created = create_booking(booking_payload)
    response = approve(created["id"], "rejected", "Room not available at that time")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "rejected"


# pylint: disable-next=redefined-outer-name
def test_approve_invalid_status(booking_payload):
    created = create_booking(booking_payload)
    response = approve(created["id"], "pending")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_approve_not_found():
    assert approve("missing").status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_approve_cancelled_booking_not_permitted(booking_payload):
    created = create_booking(booking_payload)
    client.delete(f"/api/bookings/{created['id']}")
    response = approve(created["id"])
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_reschedule_booking(booking_payload, recording_sink):
    created = create_booking(booking_payload)
    new_start = future(days=2)
    new_end = future(days=2, hours=1)
    response = client.put(
        f"/api/bookings/{created['id']}/reschedule",
        json={
            "start_time": new_start.isoformat(),
            "end_time": new_end.isoformat(),
            "reason": "Schedule change",
        },
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "approved"
    assert data["reschedule_reason"] == "Schedule change"
    assert data["rescheduled_at"] is not None
    assert parse(data["start_time"]) == new_start
    assert parse(data["end_time"]) == new_end

    sent = recording_sink.sent[-1]
    assert sent["kind"] == "rescheduled"
    assert set(sent["details"]["changes"]) == {"start_time", "end_time"}


# pylint: disable-next=redefined-outer-name
def test_reschedule_requires_a_field(booking_payload):
    created = create_booking(booking_payload)
    response = client.put(f"/api/bookings/{created['id']}/reschedule", json={})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# pylint: disable-next=redefined-outer-name
def test_reschedule_conflict(booking_payload):
    # Scenario: B1 approved, overlapping B2 approved, B1 moved onto B2's slot.
    start = future()
    b1_end = future(hours=2)
    b2_end = start + (b1_end - start) / 2
    booking_payload.update(start_time=start.isoformat(), end_time=b1_end.isoformat())
    b1 = create_booking(booking_payload)
    approve(b1["id"])

    booking_payload["end_time"] = b2_end.isoformat()
    b2 = create_booking(booking_payload)
    approve(b2["id"])

    response = client.put(
        f"/api/bookings/{b1['id']}/reschedule",
        json={"start_time": start.isoformat(), "end_time": b2_end.isoformat()},
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"]["conflict_count"] == 1

    unchanged = client.get(f"/api/bookings/{b1['id']}").json()
    assert parse(unchanged["end_time"]) == b1_end
    assert unchanged["status"] == "approved"


# pylint: disable-next=redefined-outer-name
def test_reschedule_cancelled_booking(booking_payload):
    created = create_booking(booking_payload)
    client.delete(f"/api/bookings/{created['id']}")
    response = client.put(
        f"/api/bookings/{created['id']}/reschedule", json={"purpose": "Try again"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "cancelled" in response.json()["detail"]


def test_reschedule_not_found():
    response = client.put("/api/bookings/missing/reschedule", json={"purpose": "x"})
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_cancel_booking_keeps_tombstone(booking_payload, test_db, recording_sink):
    created = create_booking(booking_payload)
    response = client.delete(f"/api/bookings/{created['id']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "cancelled"

    fetched = client.get(f"/api/bookings/{created['id']}")
    assert fetched.status_code == status.HTTP_200_OK
    assert fetched.json()["status"] == "cancelled"

    stored = test_db.query(Booking).filter(Booking.id == created["id"]).first()
    assert stored.status == BookingStatus.cancelled
    assert recording_sink.sent[-1]["kind"] == "cancelled"


def test_cancel_booking_not_found():
    response = client.delete("/api/bookings/missing")
    assert response.status_code == status.HTTP_404_NOT_FOUND
