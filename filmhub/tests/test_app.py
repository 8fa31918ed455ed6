import unittest

from fastapi.testclient import TestClient

from filmhub.app import create_app
from filmhub.db import InMemoryDbClient, UserRecord
from filmhub.dependencies import get_db_client


class BackendApiTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        app = create_app()
        app.dependency_overrides[get_db_client] = lambda: self.db
        self.client = TestClient(app)

    def _register(self, **overrides):
        payload = {
            "email": "a@lmu.edu",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "username": "ada",
            "social_links": [],
            "account_type": "filmmaker",
            "is_lmu": True,
        }
        payload.update(overrides)
        return self.client.post("/api/users", json=payload)

    def _submit(self, user_id, **overrides):
        payload = {
            "title": "Night Shift",
            "description": "A short film",
            "video_url": "https://vimeo.com/123",
            "genre": "Drama",
        }
        payload.update(overrides)
        return self.client.post(
            "/api/submissions", json=payload, headers={"X-User-Id": user_id}
        )

    def test_register_submit_and_feature(self):
        response = self._register()
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Account created successfully")
        user_id = body["user_id"]

        user = self.client.get("/api/users/by-email", params={"email": "a@lmu.edu"})
        self.assertEqual(user.status_code, 200)
        self.assertTrue(user.json()["is_approved"])

        duplicate = self._register(username="other")
        self.assertEqual(duplicate.status_code, 409)
        self.assertEqual(duplicate.json()["detail"], "User with this email already exists")

        submitted = self._submit(user_id, status="featured")
        self.assertEqual(submitted.status_code, 201)
        film_id = submitted.json()["submission_id"]
        self.assertTrue(submitted.json()["success"])

        films = self.client.get(f"/api/users/{user_id}/submissions").json()
        self.assertEqual(len(films), 1)
        self.assertEqual(films[0]["status"], "submitted")
        self.assertEqual(films[0]["user_id"], user_id)

        patched = self.client.patch(
            f"/api/submissions/{film_id}/status", json={"status": "featured"}
        )
        self.assertEqual(patched.status_code, 200)
        self.assertEqual(patched.json(), {"success": True})

        featured = self.client.get("/api/submissions", params={"status": "featured"})
        self.assertEqual([f["id"] for f in featured.json()], [film_id])

    def test_non_lmu_registration_is_waitlisted(self):
        response = self._register(email="b@gmail.com", is_lmu=False)
        self.assertEqual(response.status_code, 202)
        self.assertEqual(
            response.json(),
            {"success": False, "user_id": None, "message": "Added to waitlist"},
        )
        self.assertEqual(self.client.get("/api/users").json(), [])
        waitlist = self.client.get("/api/waitlist").json()
        self.assertEqual([w["email"] for w in waitlist], ["b@gmail.com"])

    def test_invalid_lmu_email(self):
        response = self._register(email="a@gmail.com")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["detail"],
            "Please use your LMU email address for LMU affiliation",
        )

    def test_user_by_email_not_found(self):
        response = self.client.get("/api/users/by-email", params={"email": "x@lmu.edu"})
        self.assertEqual(response.status_code, 404)

    def test_affiliation_listings(self):
        self._register()
        self.db.insert_user(
            UserRecord(email="c@gmail.com", first_name="C", last_name="C", username="c")
        )
        self.db.insert_user(
            UserRecord(
                email="d@gmail.com", first_name="D", last_name="D", username="d", is_lmu=False
            )
        )
        lmu = self.client.get("/api/users/lmu").json()
        non_lmu = self.client.get("/api/users/non-lmu").json()
        self.assertEqual([u["username"] for u in lmu], ["ada"])
        self.assertEqual([u["username"] for u in non_lmu], ["d"])
        self.assertEqual(len(self.client.get("/api/users").json()), 3)

    def test_submission_requires_identity(self):
        response = self.client.post(
            "/api/submissions",
            json={
                "title": "t",
                "description": "d",
                "video_url": "https://youtu.be/x",
                "genre": "Drama",
            },
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self._submit("not-a-user").status_code, 401)

    def test_submission_rejects_unknown_video_host(self):
        user_id = self._register().json()["user_id"]
        response = self._submit(user_id, video_url="https://example.com/film.mp4")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["detail"], "Please provide a valid YouTube or Vimeo URL"
        )
        self.assertEqual(self.client.get("/api/submissions").json(), [])

    def test_update_status_validation(self):
        response = self.client.patch(
            "/api/submissions/missing/status", json={"status": "approved"}
        )
        self.assertEqual(response.status_code, 404)
        response = self.client.patch(
            "/api/submissions/missing/status", json={"status": "rejected"}
        )
        self.assertEqual(response.status_code, 422)

    def test_genres(self):
        genres = self.client.get("/api/genres").json()["genres"]
        self.assertIn("Documentary", genres)
        self.assertEqual(len(genres), 10)


if __name__ == "__main__":
    unittest.main()
