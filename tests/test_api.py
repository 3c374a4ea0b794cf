import unittest
from unittest import mock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from appointments.database import get_db
from appointments.main import app

from .support import BENNET, RICHARD, SIMON, DatabaseTestCase

KICKOFF = {
    "title": "Kickoff",
    "date": "2024-06-03",
    "startTime": "09:00",
    "endTime": "10:00",
    "participantIds": [RICHARD],
}


class ApiTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            yield self.db

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        super().tearDown()

    def create(self, **overrides) -> str:
        response = self.client.post("/calendar/entries", json={**KICKOFF, **overrides})
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["id"]


class TestCalendarApi(ApiTestCase):
    def test_health(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "healthy"})

    def test_roster(self) -> None:
        response = self.client.get("/calendar/roster")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["id"] for p in response.json()], [RICHARD, SIMON, BENNET])
        self.assertEqual(response.json()[1]["displayName"], "Simon Höld")

    def test_create_and_list(self) -> None:
        entry_id = self.create()

        response = self.client.get("/calendar/entries", params={"from": "2024-06-03", "to": "2024-06-03"})

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body), 1)
        self.assertEqual(body[0]["id"], entry_id)
        self.assertEqual(body[0]["title"], "Kickoff")
        self.assertEqual(body[0]["startTime"], "09:00")
        self.assertEqual(body[0]["endTime"], "10:00")
        self.assertEqual(body[0]["participants"], [{"id": RICHARD, "displayName": "Richard Gumpinger"}])
        self.assertIsNone(body[0]["lead"])

    def test_empty_range(self) -> None:
        response = self.client.get("/calendar/entries", params={"from": "2030-01-01", "to": "2030-01-07"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_validation_errors_name_the_field(self) -> None:
        cases = [
            ({"participantIds": []}, "participantIds"),
            ({"participantIds": ["intruder"]}, "participantIds"),
            ({"title": " "}, "title"),
            ({"startTime": "10:00", "endTime": "09:00"}, "endTime"),
            ({"startTime": "nine"}, "startTime"),
        ]
        for overrides, field in cases:
            response = self.client.post("/calendar/entries", json={**KICKOFF, **overrides})
            self.assertEqual(response.status_code, 422, overrides)
            self.assertEqual(response.json()["field"], field)

        listed = self.client.get("/calendar/entries", params={"from": "2024-06-03", "to": "2024-06-03"})
        self.assertEqual(listed.json(), [])

    def test_malformed_date_is_rejected(self) -> None:
        response = self.client.post("/calendar/entries", json={**KICKOFF, "date": "03.06.2024"})
        self.assertEqual(response.status_code, 422)

    def test_update_replaces_participants(self) -> None:
        entry_id = self.create(participantIds=[RICHARD, SIMON])

        response = self.client.put(
            f"/calendar/entries/{entry_id}",
            json={**KICKOFF, "title": "Kickoff v2", "participantIds": [BENNET]},
        )

        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["title"], "Kickoff v2")
        self.assertEqual([p["id"] for p in response.json()["participants"]], [BENNET])

        people = self.client.get(f"/calendar/entries/{entry_id}/participants").json()
        self.assertEqual([p["id"] for p in people], [BENNET])

    def test_update_unknown_entry(self) -> None:
        response = self.client.put("/calendar/entries/missing", json=KICKOFF)
        self.assertEqual(response.status_code, 404)

    def test_get_unknown_entry(self) -> None:
        self.assertEqual(self.client.get("/calendar/entries/missing").status_code, 404)

    def test_delete_is_idempotent(self) -> None:
        entry_id = self.create()

        self.assertEqual(self.client.delete(f"/calendar/entries/{entry_id}").status_code, 204)
        self.assertEqual(self.client.delete(f"/calendar/entries/{entry_id}").status_code, 204)
        self.assertEqual(self.client.get(f"/calendar/entries/{entry_id}").status_code, 404)

    def test_week_view(self) -> None:
        first = self.create(startTime="09:00", endTime="10:00")
        second = self.create(startTime="09:30", endTime="10:30")
        third = self.create(startTime="10:00", endTime="11:00")

        response = self.client.get("/calendar/week", params={"date": "2024-06-06"})

        self.assertEqual(response.status_code, 200)
        week = response.json()
        self.assertEqual(week["weekStart"], "2024-06-03")
        self.assertEqual(week["weekEnd"], "2024-06-09")
        self.assertEqual(week["previousWeekStart"], "2024-05-27")
        self.assertEqual(week["nextWeekStart"], "2024-06-10")
        self.assertEqual(len(week["days"]), 7)
        self.assertEqual(len(week["rows"]), 3)

        richard = next(r for r in week["rows"] if r["person"]["id"] == RICHARD)
        monday = richard["cells"][0]
        self.assertEqual(monday["date"], "2024-06-03")
        by_id = {e["id"]: e for e in monday["entries"]}
        self.assertTrue(by_id[first]["hasConflict"])
        self.assertTrue(by_id[second]["hasConflict"])
        self.assertEqual(by_id[third]["conflictsWith"], [second])

        simon = next(r for r in week["rows"] if r["person"]["id"] == SIMON)
        self.assertTrue(all(not c["entries"] for c in simon["cells"]))

    def test_week_navigation_by_offset(self) -> None:
        response = self.client.get("/calendar/week", params={"date": "2024-06-03", "offset": -1})
        self.assertEqual(response.json()["weekStart"], "2024-05-27")

    def test_week_past_the_last_complete_week(self) -> None:
        response = self.client.get("/calendar/week", params={"date": "9999-12-31"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["field"], "date")

    def test_week_offset_out_of_range(self) -> None:
        for params in ({"date": "2024-06-03", "offset": 1000000}, {"date": "0001-01-01", "offset": -1}):
            response = self.client.get("/calendar/week", params=params)
            self.assertEqual(response.status_code, 422, params)
            self.assertEqual(response.json()["field"], "offset")

    def test_first_and_last_weeks_have_no_neighbour(self) -> None:
        first = self.client.get("/calendar/week", params={"date": "0001-01-01"})
        self.assertEqual(first.status_code, 200, first.text)
        self.assertEqual(first.json()["weekStart"], "0001-01-01")
        self.assertIsNone(first.json()["previousWeekStart"])
        self.assertEqual(first.json()["nextWeekStart"], "0001-01-08")

        last = self.client.get("/calendar/week", params={"date": "9999-12-26"})
        self.assertEqual(last.status_code, 200, last.text)
        self.assertEqual(last.json()["weekEnd"], "9999-12-26")
        self.assertIsNone(last.json()["nextWeekStart"])

    def test_person_entries(self) -> None:
        self.create(participantIds=[SIMON])
        self.create(participantIds=[RICHARD], title="Richard only")

        response = self.client.get(
            f"/calendar/people/{RICHARD}/entries", params={"from": "2024-06-03", "to": "2024-06-09"}
        )

        self.assertEqual([e["title"] for e in response.json()], ["Richard only"])

    def test_unknown_person(self) -> None:
        response = self.client.get("/calendar/people/nobody/entries", params={"from": "2024-06-03", "to": "2024-06-09"})
        self.assertEqual(response.status_code, 422)

    def test_failed_write_is_reported(self) -> None:
        with mock.patch.object(self.db, "commit", side_effect=OperationalError("INSERT", {}, Exception("down"))):
            response = self.client.post("/calendar/entries", json=KICKOFF)
        self.assertEqual(response.status_code, 503)
        listed = self.client.get("/calendar/entries", params={"from": "2024-06-03", "to": "2024-06-03"})
        self.assertEqual(listed.json(), [])

    def test_failed_lookup_before_delete_is_reported(self) -> None:
        entry_id = self.create()
        with mock.patch.object(self.db, "query", side_effect=OperationalError("SELECT", {}, Exception("down"))):
            response = self.client.delete(f"/calendar/entries/{entry_id}")
        self.assertEqual(response.status_code, 503)
        self.assertEqual(self.client.get(f"/calendar/entries/{entry_id}").status_code, 200)


class TestLeadApi(ApiTestCase):
    def test_lead_selector_and_label(self) -> None:
        lead = self.client.post("/leads", json={"company": "Muster GmbH"})
        self.assertEqual(lead.status_code, 201, lead.text)
        lead_id = lead.json()["id"]

        self.assertEqual(self.client.get("/leads").json(), [{"id": lead_id, "displayName": "Muster GmbH"}])

        entry_id = self.create(leadId=lead_id)
        entry = self.client.get(f"/calendar/entries/{entry_id}").json()
        self.assertEqual(entry["lead"], {"id": lead_id, "displayName": "Muster GmbH"})

        timeline = self.client.get(f"/leads/{lead_id}/entries").json()
        self.assertEqual([e["id"] for e in timeline], [entry_id])

    def test_delete_lead_nullifies_entries(self) -> None:
        lead_id = self.client.post("/leads", json={"company": "Muster GmbH"}).json()["id"]
        entry_id = self.create(leadId=lead_id)

        self.assertEqual(self.client.delete(f"/leads/{lead_id}").status_code, 204)
        self.assertEqual(self.client.delete(f"/leads/{lead_id}").status_code, 204)

        entry = self.client.get(f"/calendar/entries/{entry_id}").json()
        self.assertIsNone(entry["leadId"])
        self.assertIsNone(entry["lead"])
        self.assertEqual(self.client.get(f"/leads/{lead_id}/entries").status_code, 404)

    def test_unknown_lead_on_entry(self) -> None:
        response = self.client.post("/calendar/entries", json={**KICKOFF, "leadId": "missing"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["field"], "leadId")


if __name__ == "__main__":
    unittest.main()
