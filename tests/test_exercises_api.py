"""Tests for the exercise catalog endpoints."""

import io

from fitcoach.models import Exercise
from tests.conftest import auth_headers

NEW_EXERCISE = {
    "name": "Sled Push",
    "description": "Push a weighted sled",
    "category": "Strength",
    "difficulty": "INTERMEDIATE",
    "muscle_groups": "Quadriceps, Glutes",
    "equipment": ["Sled"],
}


class TestExerciseQueries:
    """Tests for listing and categories."""

    def test_list_ordered_by_category_then_name(self, client, users, exercises):
        resp = client.get("/api/exercises", headers=auth_headers(users["alice"]))
        names = [e["name"] for e in resp.get_json()]
        assert names == ["Running", "Wall Ball", "Bench Press", "Deadlift", "Squats"]

    def test_search_is_case_insensitive(self, client, users, exercises):
        resp = client.get("/api/exercises?search=metcon", headers=auth_headers(users["trainer1"]))
        assert [e["name"] for e in resp.get_json()] == ["Wall Ball"]

    def test_filter_by_category(self, client, users, exercises):
        resp = client.get("/api/exercises?category=Strength", headers=auth_headers(users["trainer1"]))
        assert len(resp.get_json()) == 3

    def test_categories(self, client, users, exercises):
        resp = client.get("/api/exercises/categories", headers=auth_headers(users["trainer1"]))
        assert resp.get_json() == ["Cardio", "MetCon", "Strength"]


class TestExerciseMutations:
    """Tests for create, update and delete."""

    def test_create(self, client, users, exercises):
        resp = client.post("/api/exercises", headers=auth_headers(users["trainer1"]), json=NEW_EXERCISE)
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["muscle_groups"] == ["Quadriceps", "Glutes"]
        assert body["equipment"] == ["Sled"]

    def test_create_duplicate_name_case_insensitive(self, client, users, exercises):
        resp = client.post(
            "/api/exercises", headers=auth_headers(users["trainer1"]), json={**NEW_EXERCISE, "name": "bench press"}
        )
        assert resp.status_code == 409

    def test_create_requires_fields(self, client, users):
        resp = client.post("/api/exercises", headers=auth_headers(users["trainer1"]), json={"name": "Plank"})
        assert resp.status_code == 400
        errors = resp.get_json()["errors"]
        assert {"description", "category", "difficulty"} <= set(errors)

    def test_create_forbidden_for_clients(self, client, users):
        resp = client.post("/api/exercises", headers=auth_headers(users["alice"]), json=NEW_EXERCISE)
        assert resp.status_code == 403

    def test_update(self, client, users, exercises):
        exercise = exercises["Running"]
        resp = client.patch(
            f"/api/exercises/{exercise.id}", headers=auth_headers(users["admin"]), json={"category": "Endurance"}
        )
        assert resp.status_code == 200
        assert resp.get_json()["category"] == "Endurance"

    def test_update_to_existing_name(self, client, users, exercises):
        resp = client.patch(
            f"/api/exercises/{exercises['Running'].id}", headers=auth_headers(users["admin"]), json={"name": "SQUATS"}
        )
        assert resp.status_code == 409

    def test_update_missing(self, client, users):
        resp = client.patch("/api/exercises/999", headers=auth_headers(users["admin"]), json={"category": "X"})
        assert resp.status_code == 404

    def test_delete_unused(self, client, users, exercises):
        resp = client.delete(f"/api/exercises/{exercises['Deadlift'].id}", headers=auth_headers(users["trainer1"]))
        assert resp.status_code == 200
        assert Exercise.query.filter_by(name="Deadlift").first() is None

    def test_delete_used_in_workout(self, client, users, workout, exercises):
        resp = client.delete(f"/api/exercises/{exercises['Wall Ball'].id}", headers=auth_headers(users["trainer1"]))
        assert resp.status_code == 400

    def test_delete_used_in_program_day(self, client, users, program, exercises):
        resp = client.delete(f"/api/exercises/{exercises['Bench Press'].id}", headers=auth_headers(users["trainer1"]))
        assert resp.status_code == 400


class TestExerciseImport:
    """Tests for POST /api/exercises/import."""

    def test_import_csv(self, client, users, exercises):
        csv_data = (
            "name,category,description,muscleGroups,equipment,difficulty,instructions,videoUrl\n"
            'Wall Ball,MetCon,dup,,,,,\n'
            'Farmers Walk,Strength,Carry,"Forearms, Traps",Dumbbells,beginner,Walk,\n'
            'Rope Climb,Gymnastics,Climb,Back,Rope,impossible,,\n'
            ',Nothing,,,,,,\n'
        )
        resp = client.post(
            "/api/exercises/import",
            headers=auth_headers(users["trainer1"]),
            data={"file": (io.BytesIO(csv_data.encode()), "exercises.csv")},
            content_type="multipart/form-data",
        )

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["created"] == 2
        assert body["skipped"] == 1
        assert len(body["errors"]) == 1

        farmers = Exercise.query.filter_by(name="Farmers Walk").one()
        assert farmers.muscle_groups == ["Forearms", "Traps"]
        assert farmers.difficulty == "BEGINNER"
        assert Exercise.query.filter_by(name="Rope Climb").one().difficulty == "INTERMEDIATE"

    def test_import_rejects_non_csv(self, client, users):
        resp = client.post(
            "/api/exercises/import",
            headers=auth_headers(users["trainer1"]),
            data={"file": (io.BytesIO(b"x"), "exercises.xlsx")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400

    def test_import_without_file(self, client, users):
        resp = client.post("/api/exercises/import", headers=auth_headers(users["trainer1"]))
        assert resp.status_code == 400
