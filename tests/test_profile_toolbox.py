class TestProfile:
    def test_get_my_profile(self, client, alice, auth_headers):
        response = client.get("/api/profiles/me", headers=auth_headers(alice))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == alice.id
        assert data["principal"] == alice.principal
        assert data["codename"] == "ALICE"
        assert data["avatarUrl"] is None

    def test_update_profile(self, client, alice, auth_headers):
        headers = auth_headers(alice)

        response = client.put(
            "/api/profiles/me",
            json={"codename": "ORACLE", "avatarUrl": "https://cdn.example.com/a.png"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["codename"] == "ORACLE"
        again = client.get("/api/profiles/me", headers=headers).json()["data"]
        assert again["avatarUrl"] == "https://cdn.example.com/a.png"

    def test_partial_update_keeps_other_fields(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        client.put("/api/profiles/me", json={"avatarUrl": "https://x.example/1.png"}, headers=headers)

        data = client.put("/api/profiles/me", json={"codename": "NEO"}, headers=headers).json()["data"]

        assert data["codename"] == "NEO"
        assert data["avatarUrl"] == "https://x.example/1.png"

    def test_explicit_null_clears_field(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        client.put("/api/profiles/me", json={"avatarUrl": "https://x.example/1.png"}, headers=headers)

        response = client.put(
            "/api/profiles/me", json={"codename": None, "avatarUrl": None}, headers=headers
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["codename"] is None
        assert data["avatarUrl"] is None
        again = client.get("/api/profiles/me", headers=headers).json()["data"]
        assert again["codename"] is None
        assert again["avatarUrl"] is None

    def test_invalid_profile_update(self, client, alice, auth_headers):
        headers = auth_headers(alice)

        assert client.put("/api/profiles/me", json={"codename": "A"}, headers=headers).status_code == 400
        assert (
            client.put("/api/profiles/me", json={"avatarUrl": "not a url"}, headers=headers).status_code
            == 400
        )


class TestToolbox:
    def test_empty_toolbox(self, client, alice, auth_headers):
        response = client.get("/api/toolbox", headers=auth_headers(alice))

        assert response.status_code == 200
        assert response.json() == {"data": []}

    def test_replace_rows(self, client, alice, auth_headers):
        headers = auth_headers(alice)
        saved = client.put(
            "/api/toolbox",
            json=[{"label": "keys", "content": "ssh"}, {"label": "notes", "content": "  todo  "}],
            headers=headers,
        ).json()["data"]
        assert [(r["label"], r["content"]) for r in saved] == [("keys", "ssh"), ("notes", "todo")]

        keys = saved[0]
        response = client.put(
            "/api/toolbox",
            json=[{"id": keys["id"], "label": "keys", "content": "gpg"}, {"label": "links"}],
            headers=headers,
        )

        assert response.status_code == 200
        rows = response.json()["data"]
        assert [(r["label"], r["content"]) for r in rows] == [("keys", "gpg"), ("links", "")]
        assert rows[0]["id"] == keys["id"]

    def test_rows_are_private(self, client, alice, bob, auth_headers):
        saved = client.put(
            "/api/toolbox", json=[{"label": "secret"}], headers=auth_headers(alice)
        ).json()["data"]

        response = client.put(
            "/api/toolbox",
            json=[{"id": saved[0]["id"], "label": "stolen"}],
            headers=auth_headers(bob),
        )

        assert response.status_code == 404
        assert client.get("/api/toolbox", headers=auth_headers(bob)).json()["data"] == []
        assert client.get("/api/toolbox", headers=auth_headers(alice)).json()["data"][0]["label"] == "secret"

    def test_invalid_rows(self, client, alice, auth_headers):
        headers = auth_headers(alice)

        assert client.put("/api/toolbox", json=[{"label": ""}], headers=headers).status_code == 400
        assert (
            client.put(
                "/api/toolbox", json=[{"label": "big", "content": "x" * 10_001}], headers=headers
            ).status_code
            == 400
        )
