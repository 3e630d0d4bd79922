import unittest

from testing_utils import ApiTestCase


class UserAndAuthTests(ApiTestCase):
    def test_register_and_load_user(self):
        user_id, headers = self.register()
        response = self.client.get("/api/auth", headers=headers)
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["id"], user_id)
        self.assertEqual(payload["email"], "ann@example.com")
        self.assertIn("gravatar.com", payload["avatar"])
        self.assertNotIn("password", payload)

    def test_register_duplicate_email(self):
        self.register()
        response = self.client.post(
            "/api/users",
            json={"name": "Ann", "email": "ANN@example.com", "password": "secret1"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"errors": [{"msg": "User already exists"}]})

    def test_register_validation_errors(self):
        response = self.client.post(
            "/api/users", json={"email": "not-an-email", "password": "123"}
        )
        self.assertEqual(response.status_code, 400)
        errors = {err["param"]: err["msg"] for err in response.json()["errors"]}
        self.assertEqual(errors["name"], "Name is required")
        self.assertEqual(errors["email"], "Please include a valid email")
        self.assertEqual(
            errors["password"], "Please enter a password with 6 or more characters"
        )

    def test_register_password_confirmation(self):
        response = self.client.post(
            "/api/users",
            json={
                "name": "Ann",
                "email": "ann@example.com",
                "password": "secret1",
                "passwordConfirm": "secret2",
            },
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"][0]["msg"], "Passwords do not match")
        self.assertEqual(response.json()["errors"][0]["param"], "passwordConfirm")

    def test_login(self):
        self.register()
        response = self.client.post(
            "/api/auth", json={"email": "ann@example.com", "password": "secret1"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("token", response.json())

        response = self.client.post(
            "/api/auth", json={"email": "ann@example.com", "password": "wrong!!"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"errors": [{"msg": "Invalid credentials"}]})

        response = self.client.post(
            "/api/auth", json={"email": "bob@example.com", "password": "secret1"}
        )
        self.assertEqual(response.status_code, 400)

    def test_login_email_is_case_insensitive(self):
        user_id, _ = self.register()
        response = self.client.post(
            "/api/auth", json={"email": "ANN@Example.com", "password": "secret1"}
        )
        self.assertEqual(response.status_code, 200, response.text)
        headers = {"Authorization": f"Bearer {response.json()['token']}"}
        me = self.client.get("/api/auth", headers=headers).json()
        self.assertEqual(me["id"], user_id)

    def test_missing_body_reports_each_field(self):
        response = self.client.post("/api/users")
        self.assertEqual(response.status_code, 400)
        errors = {err["param"]: err["msg"] for err in response.json()["errors"]}
        self.assertEqual(errors["name"], "Name is required")
        self.assertEqual(errors["email"], "Please include a valid email")
        self.assertEqual(
            errors["password"], "Please enter a password with 6 or more characters"
        )
        self.assertEqual(
            {err["location"] for err in response.json()["errors"]}, {"body"}
        )

    def test_missing_and_invalid_token(self):
        response = self.client.get("/api/auth")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["msg"], "No token, authorization denied")

        response = self.client.get(
            "/api/auth", headers={"Authorization": "Bearer garbage"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["msg"], "Token is not valid")

    def test_legacy_token_header(self):
        response = self.client.post(
            "/api/users",
            json={"name": "Ann", "email": "ann@example.com", "password": "secret1"},
        )
        token = response.json()["token"]
        response = self.client.get("/api/auth", headers={"x-auth-token": token})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Ann")


class ProfileTests(ApiTestCase):
    def test_me_without_profile(self):
        _, headers = self.register()
        response = self.client.get("/api/profile/me", headers=headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["msg"], "There is no profile for this user")

    def test_create_profile_requires_status_and_skills(self):
        _, headers = self.register()
        response = self.client.post("/api/profile", json={}, headers=headers)
        self.assertEqual(response.status_code, 400)
        messages = [err["msg"] for err in response.json()["errors"]]
        self.assertIn("Status is required", messages)
        self.assertIn("Skills is required", messages)

    def test_create_then_update_in_place(self):
        user_id, headers = self.register()
        created = self.client.post(
            "/api/profile",
            json={
                "status": "Developer",
                "skills": "js, go",
                "company": "Acme",
                "githubUsername": "ann",
                "twitter": "https://twitter.com/ann",
            },
            headers=headers,
        )
        self.assertEqual(created.status_code, 200, created.text)
        profile = created.json()
        self.assertEqual(profile["skills"], ["js", "go"])
        self.assertEqual(profile["githubUsername"], "ann")
        self.assertEqual(profile["user"]["id"], user_id)
        self.assertEqual(profile["social"]["twitter"], "https://twitter.com/ann")

        updated = self.client.post(
            "/api/profile",
            json={"status": "Senior Developer", "skills": ["python"]},
            headers=headers,
        ).json()
        self.assertEqual(updated["id"], profile["id"])
        self.assertEqual(updated["status"], "Senior Developer")
        self.assertEqual(updated["skills"], ["python"])
        self.assertEqual(updated["company"], "Acme")
        self.assertIsNone(updated["social"]["twitter"])
        self.assertEqual(len(self.db.profiles), 1)

        me = self.client.get("/api/profile/me", headers=headers).json()
        self.assertEqual(me["id"], profile["id"])

    def test_public_profile_lookups(self):
        user_id, headers = self.register()
        self.client.post(
            "/api/profile", json={"status": "Dev", "skills": "js"}, headers=headers
        )
        profiles = self.client.get("/api/profile").json()
        self.assertEqual(len(profiles), 1)
        self.assertEqual(profiles[0]["user"]["name"], "Ann")

        response = self.client.get(f"/api/profile/user/{user_id}")
        self.assertEqual(response.status_code, 200)

        response = self.client.get("/api/profile/user/not-an-id")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["msg"], "Profile not found")

        response = self.client.get(f"/api/profile/user/{'0' * 32}")
        self.assertEqual(response.status_code, 404)

    def test_experience_add_and_remove(self):
        _, headers = self.register()
        self.client.post(
            "/api/profile", json={"status": "Dev", "skills": "js"}, headers=headers
        )
        first = self.client.patch(
            "/api/profile/experience",
            json={"title": "Intern", "company": "Acme", "from": "2018-01-01"},
            headers=headers,
        )
        self.assertEqual(first.status_code, 200, first.text)
        second = self.client.put(
            "/api/profile/experience",
            json={
                "title": "Engineer",
                "company": "Initech",
                "from": "2019-06-01",
                "current": True,
            },
            headers=headers,
        ).json()
        titles = [entry["title"] for entry in second["experience"]]
        self.assertEqual(titles, ["Engineer", "Intern"])
        self.assertEqual(second["experience"][1]["from"], "2018-01-01")

        intern_id = second["experience"][1]["id"]
        response = self.client.delete(
            f"/api/profile/experience/{intern_id}", headers=headers
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [entry["title"] for entry in response.json()["experience"]], ["Engineer"]
        )

        response = self.client.delete(
            f"/api/profile/experience/{intern_id}", headers=headers
        )
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["msg"], "Experience not found")

    def test_experience_validation(self):
        _, headers = self.register()
        response = self.client.patch(
            "/api/profile/experience", json={"title": "Intern"}, headers=headers
        )
        self.assertEqual(response.status_code, 400)
        messages = [err["msg"] for err in response.json()["errors"]]
        self.assertEqual(messages, ["Company is required", "From date is required"])

    def test_blank_dates_from_form_inputs(self):
        _, headers = self.register()
        self.client.post(
            "/api/profile", json={"status": "Dev", "skills": "js"}, headers=headers
        )
        response = self.client.patch(
            "/api/profile/experience",
            json={"title": "Intern", "company": "Acme", "from": "", "to": ""},
            headers=headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()["errors"],
            [{"msg": "From date is required", "param": "from", "location": "body"}],
        )

        response = self.client.patch(
            "/api/profile/education",
            json={"school": "MIT", "degree": "BSc", "fieldOfStudy": "CS", "from": ""},
            headers=headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            [err["msg"] for err in response.json()["errors"]],
            ["The 'From' date of study is required"],
        )

        response = self.client.patch(
            "/api/profile/experience",
            json={
                "title": "Engineer",
                "company": "Initech",
                "from": "2019-06-01",
                "to": "",
                "current": True,
            },
            headers=headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertIsNone(response.json()["experience"][0]["to"])

    def test_experience_without_profile(self):
        _, headers = self.register()
        response = self.client.patch(
            "/api/profile/experience",
            json={"title": "Intern", "company": "Acme", "from": "2018-01-01"},
            headers=headers,
        )
        self.assertEqual(response.status_code, 404)

    def test_education_add_and_remove(self):
        _, headers = self.register()
        self.client.post(
            "/api/profile", json={"status": "Dev", "skills": "js"}, headers=headers
        )
        profile = self.client.patch(
            "/api/profile/education",
            json={
                "school": "MIT",
                "degree": "BSc",
                "fieldOfStudy": "CS",
                "from": "2010-09-01",
                "to": "2014-06-01",
            },
            headers=headers,
        ).json()
        entry = profile["education"][0]
        self.assertEqual(entry["fieldOfStudy"], "CS")
        self.assertEqual(entry["to"], "2014-06-01")

        response = self.client.delete(
            f"/api/profile/education/{entry['id']}", headers=headers
        )
        self.assertEqual(response.json()["education"], [])

        response = self.client.delete(
            f"/api/profile/education/{entry['id']}", headers=headers
        )
        self.assertEqual(response.status_code, 404)

    def test_delete_account_removes_profile_and_own_posts(self):
        ann_id, ann = self.register()
        bob_id, bob = self.register(name="Bob", email="bob@example.com")
        self.client.post("/api/profile", json={"status": "Dev", "skills": "js"}, headers=ann)
        self.client.post("/api/profile", json={"status": "Dev", "skills": "go"}, headers=bob)
        self.client.post("/api/posts", json={"text": "ann 1"}, headers=ann)
        self.client.post("/api/posts", json={"text": "ann 2"}, headers=ann)
        self.client.post("/api/posts", json={"text": "bob 1"}, headers=bob)

        response = self.client.delete("/api/profile", headers=ann)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["msg"], "User deleted from database")

        self.assertIsNone(self.db.get_user(ann_id))
        self.assertIsNone(self.db.get_profile_by_user(ann_id))
        self.assertIsNotNone(self.db.get_profile_by_user(bob_id))
        self.assertEqual([p.text for p in self.db.list_posts()], ["bob 1"])


if __name__ == "__main__":
    unittest.main()
