"""Tests for RSVP upsert, transportation validation and deletion.

Covers:
- Mutually exclusive transport options
- Campus location required for offsite events
- Upsert on (event, person)
- Shift capacity
- Delete by owner or board, and removal of the carpool seat
"""
from datetime import datetime, timedelta, timezone

from tests.conftest import auth, create_test_event, create_test_user

DRIVER_INFO = {"car_type": "Civic", "car_color": "Blue", "capacity": 3}


def _post_rsvp(client, user, event_id, **fields):
    payload = {"event_id": event_id, "campus_location": "onCampus"}
    payload.update(fields)
    return client.post("/api/rsvps/", headers=auth(user), json=payload)


def _setup(client, is_offsite=True):
    board = create_test_user(client, name="Board", role="board")
    member = create_test_user(client, name="Member")
    event = create_test_event(client, board, is_offsite=is_offsite)
    return board, member, event


class TestTransportValidation:

    def test_rider_rsvp(self, client):
        _, member, event = _setup(client)
        resp = _post_rsvp(client, member, event["event_id"], needs_ride=True)
        assert resp.status_code == 200
        data = resp.json()
        assert data["needs_ride"] is True
        assert data["campus_location"] == "onCampus"
        assert data["driver_info"] is None

    def test_driver_rsvp(self, client):
        _, member, event = _setup(client)
        resp = _post_rsvp(client, member, event["event_id"], can_drive=True, driver_info=DRIVER_INFO)
        assert resp.status_code == 200
        assert resp.json()["driver_info"] == DRIVER_INFO

    def test_drive_without_driver_info(self, client):
        _, member, event = _setup(client)
        resp = _post_rsvp(client, member, event["event_id"], can_drive=True)
        assert resp.status_code == 400
        assert resp.json()["error"] == "InvalidRsvp"

    def test_needs_ride_and_can_drive(self, client):
        _, member, event = _setup(client)
        resp = _post_rsvp(
            client, member, event["event_id"], needs_ride=True, can_drive=True, driver_info=DRIVER_INFO,
        )
        assert resp.status_code == 400

    def test_self_transport_excludes_others(self, client):
        _, member, event = _setup(client)
        resp = _post_rsvp(client, member, event["event_id"], self_transport=True, needs_ride=True)
        assert resp.status_code == 400

    def test_zero_capacity_rejected(self, client):
        _, member, event = _setup(client)
        resp = _post_rsvp(
            client, member, event["event_id"], can_drive=True,
            driver_info={"car_type": "Civic", "car_color": "Blue", "capacity": 0},
        )
        assert resp.status_code == 422

    def test_offsite_requires_campus_location(self, client):
        _, member, event = _setup(client)
        resp = _post_rsvp(client, member, event["event_id"], campus_location=None, needs_ride=True)
        assert resp.status_code == 400

    def test_invalid_campus_location(self, client):
        _, member, event = _setup(client)
        resp = _post_rsvp(client, member, event["event_id"], campus_location="onMars")
        assert resp.status_code == 400

    def test_onsite_event_ignores_campus_location(self, client):
        _, member, event = _setup(client, is_offsite=False)
        resp = _post_rsvp(client, member, event["event_id"], campus_location=None)
        assert resp.status_code == 200
        assert resp.json()["campus_location"] is None

    def test_unknown_event(self, client):
        member = create_test_user(client, name="Member")
        resp = _post_rsvp(client, member, "no-such-event")
        assert resp.status_code == 404


class TestUpsert:

    def test_second_rsvp_updates_in_place(self, client):
        _, member, event = _setup(client)
        first = _post_rsvp(client, member, event["event_id"], needs_ride=True).json()
        second = _post_rsvp(client, member, event["event_id"], self_transport=True).json()
        assert second["rsvp_id"] == first["rsvp_id"]
        assert second["needs_ride"] is False
        assert second["self_transport"] is True

        mine = client.get("/api/rsvps/mine", headers=auth(member)).json()
        assert len(mine) == 1

    def test_switching_to_rider_clears_driver_info(self, client):
        _, member, event = _setup(client)
        _post_rsvp(client, member, event["event_id"], can_drive=True, driver_info=DRIVER_INFO)
        resp = _post_rsvp(client, member, event["event_id"], needs_ride=True)
        assert resp.json()["driver_info"] is None


class TestShiftCapacity:

    def _add_shift(self, client, board, event_id, required_people=1):
        start = datetime.now(timezone.utc) + timedelta(days=7)
        resp = client.post(f"/api/events/{event_id}/shifts", headers=auth(board), json={
            "start_time_utc": start.isoformat(),
            "end_time_utc": (start + timedelta(hours=1)).isoformat(),
            "required_people": required_people,
        })
        assert resp.status_code == 201
        return resp.json()

    def test_full_shift_rejected(self, client):
        board, member, event = _setup(client)
        other = create_test_user(client, name="Other")
        shift = self._add_shift(client, board, event["event_id"])

        assert _post_rsvp(client, member, event["event_id"], shift_id=shift["shift_id"]).status_code == 200
        resp = _post_rsvp(client, other, event["event_id"], shift_id=shift["shift_id"])
        assert resp.status_code == 400
        assert "full" in resp.json()["detail"]

    def test_member_already_in_shift_can_update(self, client):
        board, member, event = _setup(client)
        shift = self._add_shift(client, board, event["event_id"])
        _post_rsvp(client, member, event["event_id"], shift_id=shift["shift_id"])
        resp = _post_rsvp(client, member, event["event_id"], shift_id=shift["shift_id"], needs_ride=True)
        assert resp.status_code == 200

    def test_shift_of_other_event_rejected(self, client):
        board, member, event = _setup(client)
        other_event = create_test_event(client, board, title="Other Drive")
        shift = self._add_shift(client, board, other_event["event_id"])
        resp = _post_rsvp(client, member, event["event_id"], shift_id=shift["shift_id"])
        assert resp.status_code == 400


class TestDeleteRsvp:

    def test_owner_deletes(self, client):
        _, member, event = _setup(client)
        rsvp = _post_rsvp(client, member, event["event_id"]).json()
        resp = client.delete(f"/api/rsvps/{rsvp['rsvp_id']}", headers=auth(member))
        assert resp.status_code == 204
        assert client.get("/api/rsvps/mine", headers=auth(member)).json() == []

    def test_other_member_forbidden(self, client):
        _, member, event = _setup(client)
        other = create_test_user(client, name="Other")
        rsvp = _post_rsvp(client, member, event["event_id"]).json()
        resp = client.delete(f"/api/rsvps/{rsvp['rsvp_id']}", headers=auth(other))
        assert resp.status_code == 403

    def test_board_deletes_any(self, client):
        board, member, event = _setup(client)
        rsvp = _post_rsvp(client, member, event["event_id"]).json()
        resp = client.delete(f"/api/rsvps/{rsvp['rsvp_id']}", headers=auth(board))
        assert resp.status_code == 204

    def test_delete_unseats_rider(self, client):
        board, member, event = _setup(client)
        driver = create_test_user(client, name="Driver")
        _post_rsvp(client, driver, event["event_id"], can_drive=True, driver_info=DRIVER_INFO)
        rider = _post_rsvp(client, member, event["event_id"], needs_ride=True).json()
        client.post(f"/api/events/{event['event_id']}/carpools/generate", headers=auth(board))

        client.delete(f"/api/rsvps/{rider['rsvp_id']}", headers=auth(member))
        carpools = client.get(f"/api/events/{event['event_id']}/carpools", headers=auth(board)).json()
        assert len(carpools) == 1
        assert carpools[0]["riders"] == []

    def test_delete_driver_removes_carpool(self, client):
        board, member, event = _setup(client)
        driver = create_test_user(client, name="Driver")
        rsvp = _post_rsvp(client, driver, event["event_id"], can_drive=True, driver_info=DRIVER_INFO).json()
        _post_rsvp(client, member, event["event_id"], needs_ride=True)
        client.post(f"/api/events/{event['event_id']}/carpools/generate", headers=auth(board))

        client.delete(f"/api/rsvps/{rsvp['rsvp_id']}", headers=auth(driver))
        carpools = client.get(f"/api/events/{event['event_id']}/carpools", headers=auth(board)).json()
        assert carpools == []


class TestRsvpChangesWithCarpools:
    """RSVP edits after carpools exist: seats, capacity and the finalized lock."""

    def _setup(self, client, riders=2, capacity=2):
        board, _, event = _setup(client)
        driver = create_test_user(client, name="Driver")
        driver_info = {**DRIVER_INFO, "capacity": capacity}
        _post_rsvp(client, driver, event["event_id"], can_drive=True, driver_info=driver_info)
        seated = []
        for i in range(riders):
            rider = create_test_user(client, name=f"Rider {i}")
            _post_rsvp(client, rider, event["event_id"], needs_ride=True)
            seated.append(rider)
        resp = client.post(f"/api/events/{event['event_id']}/carpools/generate", headers=auth(board))
        assert resp.json()["riders_assigned"] == riders
        return board, event, driver, driver_info, seated

    def _carpools(self, client, board, event_id):
        return client.get(f"/api/events/{event_id}/carpools", headers=auth(board)).json()

    def _finalize(self, client, board, event_id):
        resp = client.post(f"/api/events/{event_id}/carpools/finalize", headers=auth(board))
        assert resp.status_code == 200

    def test_capacity_below_seated_riders_rejected(self, client):
        board, event, driver, _, _ = self._setup(client)
        resp = _post_rsvp(
            client, driver, event["event_id"], can_drive=True, driver_info={**DRIVER_INFO, "capacity": 1},
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "CapacityExceeded"

        (carpool,) = self._carpools(client, board, event["event_id"])
        assert carpool["driver"]["capacity"] == 2
        assert len(carpool["riders"]) == 2

    def test_capacity_down_to_seated_riders_allowed(self, client):
        board, event, driver, _, _ = self._setup(client, riders=1, capacity=3)
        resp = _post_rsvp(
            client, driver, event["event_id"], can_drive=True, driver_info={**DRIVER_INFO, "capacity": 1},
        )
        assert resp.status_code == 200
        (carpool,) = self._carpools(client, board, event["event_id"])
        assert carpool["driver"]["capacity"] == 1
        assert len(carpool["riders"]) == 1

    def test_driver_with_riders_cannot_stop_driving(self, client):
        board, event, driver, _, _ = self._setup(client)
        resp = _post_rsvp(client, driver, event["event_id"], needs_ride=True)
        assert resp.status_code == 409
        assert resp.json()["error"] == "CapacityExceeded"
        (carpool,) = self._carpools(client, board, event["event_id"])
        assert carpool["driver"]["car_type"] == "Civic"

    def test_driver_without_riders_loses_empty_carpool(self, client):
        board, event, driver, _, _ = self._setup(client, riders=0)
        resp = _post_rsvp(client, driver, event["event_id"], self_transport=True)
        assert resp.status_code == 200
        assert self._carpools(client, board, event["event_id"]) == []

    def test_rider_who_stops_needing_a_ride_is_unseated(self, client):
        board, event, _, _, seated = self._setup(client)
        resp = _post_rsvp(client, seated[0], event["event_id"], self_transport=True)
        assert resp.status_code == 200
        (carpool,) = self._carpools(client, board, event["event_id"])
        assert [r["name"] for r in carpool["riders"]] == ["Rider 1"]

    def test_finalized_driver_locked(self, client):
        board, event, driver, _, _ = self._setup(client, riders=1)
        self._finalize(client, board, event["event_id"])
        before = self._carpools(client, board, event["event_id"])

        resp = _post_rsvp(client, driver, event["event_id"], needs_ride=True)
        assert resp.status_code == 409
        assert resp.json()["error"] == "InvalidState"
        after = self._carpools(client, board, event["event_id"])
        assert after == before
        assert after[0]["status"] == "finalized"
        assert len(after[0]["riders"]) <= after[0]["driver"]["capacity"]

    def test_finalized_rider_locked(self, client):
        board, event, _, _, seated = self._setup(client)
        self._finalize(client, board, event["event_id"])
        resp = _post_rsvp(client, seated[0], event["event_id"], self_transport=True)
        assert resp.status_code == 409
        (carpool,) = self._carpools(client, board, event["event_id"])
        assert len(carpool["riders"]) == 2

    def test_finalized_unchanged_resubmit_allowed(self, client):
        board, event, driver, driver_info, _ = self._setup(client)
        self._finalize(client, board, event["event_id"])
        resp = _post_rsvp(client, driver, event["event_id"], can_drive=True, driver_info=driver_info)
        assert resp.status_code == 200

    def test_delete_in_finalized_carpool_rejected(self, client):
        board, event, driver, _, seated = self._setup(client)
        self._finalize(client, board, event["event_id"])
        mine = client.get("/api/rsvps/mine", headers=auth(seated[0])).json()

        resp = client.delete(f"/api/rsvps/{mine[0]['rsvp_id']}", headers=auth(board))
        assert resp.status_code == 409
        assert resp.json()["error"] == "InvalidState"
        (carpool,) = self._carpools(client, board, event["event_id"])
        assert len(carpool["riders"]) == 2

    def test_delete_driver_of_finalized_carpool_rejected(self, client):
        board, event, driver, _, _ = self._setup(client)
        self._finalize(client, board, event["event_id"])
        mine = client.get("/api/rsvps/mine", headers=auth(driver)).json()
        resp = client.delete(f"/api/rsvps/{mine[0]['rsvp_id']}", headers=auth(driver))
        assert resp.status_code == 409
        assert len(self._carpools(client, board, event["event_id"])) == 1
