"""Tests for workout and program assignment endpoints."""

import logging
from datetime import date

from fitcoach.models import ClientWorkout, ClientWorkoutProgram, Workout, WorkoutProgram, Exercise, WorkoutProgress
from tests.conftest import auth_headers


class TestProgramAssignmentCreate:
    """Tests for POST /api/workout-programs/assign."""

    def test_assign_program_returns_end_date_and_days(self, client, users, program):
        resp = client.post("/api/workout-programs/assign", headers=auth_headers(users["trainer1"]), json={
            "client_id": users["alice"].id,
            "program_id": program.id,
            "start_date": "2024-01-30",
        })

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["status"] == "SCHEDULED"
        assert body["start_date"] == "2024-01-30"
        assert body["end_date"] == "2024-02-02"
        assert [d["date"] for d in body["days"]] == ["2024-01-30", "2024-01-31", "2024-02-01", "2024-02-02"]
        assert body["days"][0]["id"] == f"{body['id']}-day-1"

    def test_datetime_start_keeps_calendar_day(self, client, users, program):
        resp = client.post("/api/workout-programs/assign", headers=auth_headers(users["admin"]), json={
            "client_id": users["alice"].id,
            "program_id": program.id,
            "start_date": "2024-01-30T23:00:00Z",
        })
        assert resp.status_code == 201
        assert resp.get_json()["start_date"] == "2024-01-30"

    def test_inactive_subscription_rejected_before_insert(self, client, users, program):
        resp = client.post("/api/workout-programs/assign", headers=auth_headers(users["trainer1"]), json={
            "client_id": users["carol"].id,
            "program_id": program.id,
            "start_date": "2024-01-30",
        })

        assert resp.status_code == 400
        assert "active subscription" in resp.get_json()["msg"]
        assert ClientWorkoutProgram.query.count() == 0

    def test_trainer_cannot_assign_foreign_client(self, client, users, program):
        resp = client.post("/api/workout-programs/assign", headers=auth_headers(users["trainer1"]), json={
            "client_id": users["bob"].id,
            "program_id": program.id,
            "start_date": "2024-01-30",
        })
        assert resp.status_code == 404
        assert ClientWorkoutProgram.query.count() == 0

    def test_unknown_program(self, client, users):
        resp = client.post("/api/workout-programs/assign", headers=auth_headers(users["admin"]), json={
            "client_id": users["alice"].id,
            "program_id": 999,
            "start_date": "2024-01-30",
        })
        assert resp.status_code == 404

    def test_missing_fields(self, client, users):
        resp = client.post("/api/workout-programs/assign", headers=auth_headers(users["admin"]), json={
            "client_id": users["alice"].id,
        })
        assert resp.status_code == 400
        assert "program_id" in resp.get_json()["errors"]

    def test_client_role_forbidden(self, client, users, program):
        resp = client.post("/api/workout-programs/assign", headers=auth_headers(users["alice"]), json={
            "client_id": users["alice"].id,
            "program_id": program.id,
            "start_date": "2024-01-30",
        })
        assert resp.status_code == 403


class TestWorkoutAssignmentCreate:
    """Tests for POST /api/workouts/assign and /bulk."""

    def test_assign_workout(self, client, users, workout):
        resp = client.post("/api/workouts/assign", headers=auth_headers(users["trainer1"]), json={
            "client_id": users["alice"].id,
            "workout_id": workout.id,
            "scheduled_date": "2024-02-10",
            "notes": "Go easy",
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["scheduled_date"] == "2024-02-10"
        assert body["workout"]["name"] == "Quick Circuit"

    def test_same_date_twice_is_allowed(self, client, users, workout):
        payload = {"client_id": users["alice"].id, "workout_id": workout.id, "scheduled_date": "2024-02-10"}
        headers = auth_headers(users["trainer1"])
        assert client.post("/api/workouts/assign", headers=headers, json=payload).status_code == 201
        assert client.post("/api/workouts/assign", headers=headers, json=payload).status_code == 201
        assert ClientWorkout.query.count() == 2

    def test_check_order_client_before_workout(self, client, users):
        resp = client.post("/api/workouts/assign", headers=auth_headers(users["admin"]), json={
            "client_id": users["trainer1"].id,
            "workout_id": 999,
            "scheduled_date": "2024-02-10",
        })
        assert resp.status_code == 404
        assert resp.get_json()["msg"] == "User not found or is not a client"

    def test_inactive_subscription(self, client, users, workout):
        resp = client.post("/api/workouts/assign", headers=auth_headers(users["trainer1"]), json={
            "client_id": users["carol"].id,
            "workout_id": workout.id,
            "scheduled_date": "2024-02-10",
        })
        assert resp.status_code == 400
        assert ClientWorkout.query.count() == 0

    def test_invalid_date(self, client, users, workout):
        resp = client.post("/api/workouts/assign", headers=auth_headers(users["trainer1"]), json={
            "client_id": users["alice"].id,
            "workout_id": workout.id,
            "scheduled_date": "next tuesday",
        })
        assert resp.status_code == 400

    def test_date_with_trailing_text_rejected(self, client, users, workout):
        resp = client.post("/api/workouts/assign", headers=auth_headers(users["trainer1"]), json={
            "client_id": users["alice"].id,
            "workout_id": workout.id,
            "scheduled_date": "2024-01-30NOT-A-DATE",
        })
        assert resp.status_code == 400
        assert ClientWorkout.query.count() == 0

    def test_bulk_assign(self, client, users, workout):
        resp = client.post("/api/workouts/assign/bulk", headers=auth_headers(users["trainer1"]), json={
            "client_id": users["alice"].id,
            "workout_id": workout.id,
            "dates": ["2024-02-10", "2024-02-12", "2024-02-14"],
        })
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["assigned"] == 3
        assert body["failed"] == 0
        assert ClientWorkout.query.filter_by(client_id=users["alice"].id).count() == 3

    def test_bulk_assign_keeps_other_dates_when_one_fails(self, client, users, workout, monkeypatch, caplog):
        def build(**kwargs):
            if kwargs["scheduled_date"] == date(2024, 2, 12):
                raise RuntimeError("insert failed")
            return ClientWorkout(**kwargs)

        monkeypatch.setattr("fitcoach.services.assignments.ClientWorkout", build)
        with caplog.at_level(logging.ERROR, logger="fitcoach.services.assignments"):
            resp = client.post("/api/workouts/assign/bulk", headers=auth_headers(users["trainer1"]), json={
                "client_id": users["alice"].id,
                "workout_id": workout.id,
                "dates": ["2024-02-10", "2024-02-12", "2024-02-14"],
            })

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["assigned"] == 2
        assert body["errors"] == [{"date": "2024-02-12", "error": "Could not create assignment"}]
        failures = [r for r in caplog.records if r.name == "fitcoach.services.assignments" and r.exc_info]
        assert len(failures) == 1


class TestAssignmentVisibility:
    """Tests for role-scoped assignment listing."""

    def test_trainer_sees_only_own_clients(self, client, users, assignments):
        resp = client.get("/api/workouts/assign", headers=auth_headers(users["trainer1"]))
        assert resp.status_code == 200
        assert {a["client_id"] for a in resp.get_json()} == {users["alice"].id}

    def test_trainer_foreign_client_is_404(self, client, users, assignments):
        resp = client.get(
            f"/api/workouts/assign?client_id={users['bob'].id}", headers=auth_headers(users["trainer1"])
        )
        assert resp.status_code == 404

        resp = client.get(
            f"/api/workout-programs/assign?client_id={users['bob'].id}", headers=auth_headers(users["trainer1"])
        )
        assert resp.status_code == 404

    def test_admin_sees_union_without_duplicates(self, client, users, assignments):
        resp = client.get("/api/workouts/assign", headers=auth_headers(users["admin"]))
        ids = [a["id"] for a in resp.get_json()]
        assert sorted(ids) == sorted([assignments["alice_workout"].id, assignments["bob_workout"].id])

        resp = client.get("/api/workout-programs/assign", headers=auth_headers(users["admin"]))
        ids = [a["id"] for a in resp.get_json()]
        assert len(ids) == len(set(ids)) == 2

    def test_client_sees_only_own(self, client, users, assignments):
        resp = client.get("/api/workout-programs/assign", headers=auth_headers(users["bob"]))
        body = resp.get_json()
        assert [a["client_id"] for a in body] == [users["bob"].id]
        assert len(body[0]["days"]) == 4

        resp = client.get(
            f"/api/workouts/assign?client_id={users['alice'].id}", headers=auth_headers(users["bob"])
        )
        assert resp.status_code == 404

    def test_listing_follows_reassignment(self, client, users, assignments, db):
        profile = users["bob"].client_profile
        profile.trainer_id = users["trainer1"].id
        db.session.commit()

        resp = client.get("/api/workouts/assign", headers=auth_headers(users["trainer1"]))
        assert {a["client_id"] for a in resp.get_json()} == {users["alice"].id, users["bob"].id}

    def test_requires_authentication(self, client, assignments):
        resp = client.get("/api/workouts/assign")
        assert resp.status_code == 401
        assert "msg" in resp.get_json()


class TestAssignmentUpdateDelete:
    """Tests for PATCH and DELETE on assignments."""

    def test_client_completes_own_workout(self, client, users, assignments):
        assignment = assignments["alice_workout"]
        resp = client.patch(
            f"/api/workouts/assign/{assignment.id}",
            headers=auth_headers(users["alice"]),
            json={"status": "COMPLETED"},
        )
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["status"] == "COMPLETED"
        assert body["completed_at"] is not None

    def test_status_back_clears_completed_at(self, client, users, assignments):
        assignment = assignments["alice_program"]
        headers = auth_headers(users["trainer1"])
        client.patch(f"/api/workout-programs/assign/{assignment.id}", headers=headers, json={"status": "COMPLETED"})
        resp = client.patch(
            f"/api/workout-programs/assign/{assignment.id}", headers=headers, json={"status": "IN_PROGRESS"}
        )
        assert resp.get_json()["completed_at"] is None

    def test_invalid_status(self, client, users, assignments):
        resp = client.patch(
            f"/api/workouts/assign/{assignments['alice_workout'].id}",
            headers=auth_headers(users["alice"]),
            json={"status": "DONE"},
        )
        assert resp.status_code == 400

    def test_trainer_cannot_update_foreign_assignment(self, client, users, assignments):
        resp = client.patch(
            f"/api/workouts/assign/{assignments['bob_workout'].id}",
            headers=auth_headers(users["trainer1"]),
            json={"status": "MISSED"},
        )
        assert resp.status_code == 404

    def test_delete_removes_exactly_one_row(self, client, users, assignments):
        workouts_before = Workout.query.count()
        programs_before = WorkoutProgram.query.count()
        exercises_before = Exercise.query.count()

        resp = client.delete(
            f"/api/workout-programs/assign/{assignments['alice_program'].id}",
            headers=auth_headers(users["trainer1"]),
        )

        assert resp.status_code == 200
        assert ClientWorkoutProgram.query.count() == 1
        assert ClientWorkout.query.count() == 2
        assert WorkoutProgram.query.count() == programs_before
        assert Workout.query.count() == workouts_before
        assert Exercise.query.count() == exercises_before

    def test_delete_workout_assignment_removes_progress(self, client, users, assignments, exercises, db):
        assignment = assignments["alice_workout"]
        db.session.add(WorkoutProgress(
            client_id=users["alice"].id, exercise_id=exercises["Wall Ball"].id, client_workout_id=assignment.id,
        ))
        db.session.commit()

        resp = client.delete(f"/api/workouts/assign/{assignment.id}", headers=auth_headers(users["admin"]))

        assert resp.status_code == 200
        assert ClientWorkout.query.count() == 1
        assert WorkoutProgress.query.count() == 0

    def test_trainer_cannot_delete_foreign_assignment(self, client, users, assignments):
        resp = client.delete(
            f"/api/workouts/assign/{assignments['bob_workout'].id}", headers=auth_headers(users["trainer1"])
        )
        assert resp.status_code == 404
        assert ClientWorkout.query.count() == 2

    def test_client_cannot_delete(self, client, users, assignments):
        resp = client.delete(
            f"/api/workouts/assign/{assignments['alice_workout'].id}", headers=auth_headers(users["alice"])
        )
        assert resp.status_code == 403
