from __future__ import annotations

from datetime import date, datetime, time, timedelta

TODAY = date.today()
API = "/api/v1"


def booking_payload(guest_id, room_ids, check_in=TODAY, nights=2, **extra):
    payload = {
        "guest_id": guest_id,
        "room_ids": room_ids,
        "check_in": check_in.isoformat(),
        "check_out": (check_in + timedelta(days=nights)).isoformat(),
    }
    payload.update(extra)
    return payload


class TestHealth:
    def test_health(self, client):
        response = client.get(f"{API}/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "ok"
        assert body["environment"] == "test"


class TestRooms:
    def test_room_type_and_room(self, client):
        response = client.post(f"{API}/rooms/types", json={"name": "Suite", "base_price": "2500"})
        assert response.status_code == 201
        type_id = response.json()["id"]

        duplicate = client.post(f"{API}/rooms/types", json={"name": "Suite", "base_price": "2000"})
        assert duplicate.status_code == 409
        assert duplicate.json()["error"]["code"] == "DUPLICATE_ENTRY"

        response = client.post(f"{API}/rooms", json={"number": "501", "room_type_id": type_id, "floor": 5})
        assert response.status_code == 201
        assert response.json()["room_type_name"] == "Suite"

    def test_status_filter_and_update(self, client, rooms):
        response = client.patch(f"{API}/rooms/{rooms[0].id}/status", json={"status": "maintenance"})
        assert response.status_code == 200
        assert response.json()["status"] == "maintenance"

        available = client.get(f"{API}/rooms", params={"status": "available"}).json()
        assert [room["number"] for room in available] == ["102", "103"]

    def test_availability(self, client, rooms, guest):
        client.post(f"{API}/bookings", json=booking_payload(guest.id, [rooms[0].id]))
        response = client.get(
            f"{API}/rooms/available",
            params={"check_in": TODAY.isoformat(), "check_out": (TODAY + timedelta(days=1)).isoformat()},
        )
        assert [room["number"] for room in response.json()] == ["102", "103"]

    def test_block_and_unblock(self, client, rooms, staff_member):
        response = client.post(
            f"{API}/rooms/{rooms[2].id}/block",
            json={"reason": "Renovation", "staff_id": staff_member.id},
        )
        assert response.status_code == 201
        assert response.json()["is_active"] is True
        assert client.get(f"{API}/rooms/{rooms[2].id}").json()["status"] == "blocked"

        again = client.post(f"{API}/rooms/{rooms[2].id}/block", json={"reason": "Paint"})
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "INVALID_STATE"

        response = client.post(f"{API}/rooms/{rooms[2].id}/unblock", json={"reason": "Done"})
        assert response.status_code == 200
        assert response.json()["unblock_reason"] == "Done"
        assert client.get(f"{API}/rooms/{rooms[2].id}").json()["status"] == "available"

    def test_unknown_room(self, client):
        response = client.get(f"{API}/rooms/missing")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ROOM_NOT_FOUND"


class TestGuests:
    def test_crud(self, client):
        created = client.post(f"{API}/guests", json={"name": "Vikram Shah", "phone": "9000000001"})
        assert created.status_code == 201
        guest_id = created.json()["id"]

        page = client.get(f"{API}/guests", params={"search": "vikram"}).json()
        assert page["total"] == 1
        assert page["total_pages"] == 1

        detail = client.get(f"{API}/guests/{guest_id}").json()
        assert detail["booking_count"] == 0

        patched = client.patch(f"{API}/guests/{guest_id}", json={"nationality": "Indian"})
        assert patched.json()["nationality"] == "Indian"

        assert client.delete(f"{API}/guests/{guest_id}").status_code == 204
        assert client.get(f"{API}/guests/{guest_id}").status_code == 404

    def test_invalid_email(self, client):
        response = client.post(f"{API}/guests", json={"name": "X", "email": "not-an-email"})
        assert response.status_code == 422


class TestStaff:
    def test_create_duplicate_and_delete(self, client):
        response = client.post(f"{API}/staff", json={"name": "Meera", "email": "meera@example.com"})
        assert response.status_code == 201
        staff_id = response.json()["id"]

        duplicate = client.post(f"{API}/staff", json={"name": "Meera", "email": "MEERA@example.com"})
        assert duplicate.status_code == 409

        logs = client.get(f"{API}/staff/logs", params={"action": "CREATE_STAFF"}).json()
        assert len(logs) == 1

        assert client.delete(f"{API}/staff/{staff_id}").status_code == 204


class TestBookingFlow:
    def test_book_pay_and_check_out(self, client, guest, rooms, staff_member):
        response = client.post(f"{API}/bookings", json=booking_payload(
            guest.id,
            [rooms[0].id, rooms[1].id],
            staff_id=staff_member.id,
            advance_payments=[{"method": "upi", "amount": "500"}],
        ))
        assert response.status_code == 201
        booking = response.json()
        booking_id = booking["id"]
        assert booking["booking_number"].startswith("BK")
        assert booking["payment"] == {
            "total_amount": 4000.0,
            "advance_total": 500.0,
            "receipt_total": 0.0,
            "outstanding_amount": 3500.0,
            "price_adjustment": 0.0,
        }

        response = client.post(f"{API}/bookings/{booking_id}/check-in", json={"staff_id": staff_member.id})
        assert response.json()["status"] == "checked_in"

        response = client.post(f"{API}/bookings/{booking_id}/charges", json={"description": "Dinner", "unit_price": "450"})
        assert response.status_code == 201
        assert response.json()["payment"]["total_amount"] == 4450.0

        response = client.post(f"{API}/bookings/{booking_id}/payments", json={"amount": "1000", "method": "card"})
        assert response.status_code == 201
        assert response.json()["payment"]["outstanding_amount"] == 2950.0

        transactions = client.get(f"{API}/bookings/{booking_id}/transactions").json()
        assert sorted(t["transaction_type"] for t in transactions) == ["advance", "receipt"]

        checkout_at = datetime.combine(TODAY + timedelta(days=2), time(11)).isoformat()
        preview = client.post(f"{API}/checkout/{booking_id}/preview", json={"actual_check_out": checkout_at}).json()
        assert preview["remaining_balance"] == 2950.0

        response = client.post(f"{API}/checkout", json={
            "booking_id": booking_id,
            "actual_check_out": checkout_at,
            "collect_amount": "2950",
            "payment_method": "cash",
            "staff_id": staff_member.id,
        })
        assert response.status_code == 200
        result = response.json()
        assert result["booking_status"] == "checked_out"
        assert result["remaining_balance"] == 0.0
        assert len(result["housekeeping_tasks"]) == 2

        tasks = client.get(f"{API}/housekeeping/tasks", params={"status": "pending"}).json()
        assert {task["room_number"] for task in tasks} == {"101", "102"}

        stats = client.get(
            f"{API}/checkout/statistics",
            params={"fromDate": (TODAY + timedelta(days=2)).isoformat(), "toDate": (TODAY + timedelta(days=2)).isoformat()},
        ).json()
        assert stats["total_checkouts"] == 2
        assert stats["on_time_checkouts"] == 2

    def test_room_transfer(self, client, guest, rooms, staff_member):
        booking = client.post(f"{API}/bookings", json=booking_payload(guest.id, [rooms[0].id])).json()
        leg_id = booking["rooms"][0]["id"]

        options = client.get(f"{API}/bookings/{booking['id']}/transfer-rooms", params={"booking_room_id": leg_id})
        assert [room["number"] for room in options.json()] == ["102", "103"]

        response = client.post(f"{API}/bookings/{booking['id']}/transfer", json={
            "booking_room_id": leg_id,
            "new_room_id": rooms[2].id,
            "reason": "Room upgrade",
            "staff_id": staff_member.id,
        })
        assert response.status_code == 200
        body = response.json()
        assert body["booking"]["rooms"][0]["room_number"] == "103"
        assert (body["transfer"]["from_room_number"], body["transfer"]["to_room_number"]) == ("101", "103")
        assert body["transfer"]["transfer_staff_name"] == "Ravi Kumar"

        history = client.get(f"{API}/bookings/{booking['id']}/transfers").json()
        assert [entry["reason"] for entry in history] == ["Room upgrade"]

        same = client.post(f"{API}/bookings/{booking['id']}/transfer", json={
            "booking_room_id": leg_id,
            "new_room_id": rooms[2].id,
            "reason": "Room upgrade",
        })
        assert same.status_code == 400

        report = client.get(
            f"{API}/reports/rooms-transfers/export",
            params={"fromDate": TODAY.strftime("%d/%m/%Y"), "toDate": TODAY.strftime("%d/%m/%Y"), "format": "csv"},
        )
        assert report.status_code == 200
        assert "Room upgrade" in report.content.decode("utf-8")

    def test_double_booking_conflict(self, client, guest, rooms):
        assert client.post(f"{API}/bookings", json=booking_payload(guest.id, [rooms[0].id])).status_code == 201
        response = client.post(f"{API}/bookings", json=booking_payload(guest.id, [rooms[0].id], nights=1))
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ROOM_UNAVAILABLE"

    def test_missing_guest_is_rejected(self, client, rooms):
        response = client.post(f"{API}/bookings", json=booking_payload(None, [rooms[0].id]))
        assert response.status_code == 422

    def test_update_reports_room_errors(self, client, guest, rooms):
        booking = client.post(f"{API}/bookings", json=booking_payload(guest.id, [rooms[0].id])).json()
        leg_id = booking["rooms"][0]["id"]

        response = client.patch(f"{API}/bookings/{booking['id']}", json={
            "special_requests": "Extra pillows",
            "rooms": [{"id": leg_id}, {"room_id": "missing"}],
        })
        assert response.status_code == 200
        body = response.json()
        assert body["booking"]["special_requests"] == "Extra pillows"
        assert len(body["room_errors"]) == 1
        assert body["room_errors"][0]["index"] == 1
        assert body["room_errors"][0]["room_id"] == "missing"

    def test_cancel_and_list(self, client, guest, rooms):
        booking = client.post(f"{API}/bookings", json=booking_payload(guest.id, [rooms[0].id])).json()
        response = client.post(f"{API}/bookings/{booking['id']}/cancel", json={"reason": "Plans changed"})
        assert response.json()["status"] == "cancelled"

        page = client.get(f"{API}/bookings", params={"status": "cancelled"}).json()
        assert page["total"] == 1
        assert page["items"][0]["id"] == booking["id"]

        again = client.post(f"{API}/bookings/{booking['id']}/cancel", json={})
        assert again.status_code == 409


class TestAlerts:
    def test_process_and_dismiss(self, client, guest, rooms):
        booking = client.post(
            f"{API}/bookings",
            json=booking_payload(guest.id, [rooms[0].id], check_in=TODAY - timedelta(days=3), nights=1),
        ).json()
        client.post(f"{API}/bookings/{booking['id']}/check-in", json={})

        result = client.post(f"{API}/checkout/notifications/process").json()
        assert result["overdue"] == 1
        alert_id = result["notifications"][0]["id"]

        alerts = client.get(f"{API}/checkout/alerts").json()
        assert [alert["id"] for alert in alerts] == [alert_id]

        response = client.post(f"{API}/checkout/alerts/{alert_id}/dismiss", json={})
        assert response.json()["is_active"] is False
        assert client.get(f"{API}/checkout/alerts").json() == []
