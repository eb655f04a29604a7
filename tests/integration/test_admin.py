"""
Admin panel integration tests.

Verifies:
- Admin-only access
- Customer CRUD with plan history
- Account deletion with photo cleanup
"""

from fastapi.testclient import TestClient

from revastudio.models import new_photo


def user_payload(**overrides) -> dict:
    data = {
        "name": "Carla Dias",
        "email": "carla@example.com",
        "password": "secret1",
        "endereco": "Rua C, 3",
        "telefone": "27 97777-2222",
        "cnpj": "11.222.333/0001-44",
        "plan": "essencial",
        "plan_type": "mensal",
        "payment_method": "boleto",
    }
    data.update(overrides)
    return data


class TestAdminAccess:

    def test_regular_user_forbidden(self, authenticated_client: TestClient):
        assert authenticated_client.get("/api/admin/users").status_code == 403

    def test_anonymous_unauthorized(self, client: TestClient):
        assert client.get("/api/admin/users").status_code == 401


class TestAdminUsers:

    def test_list_customers_with_usage(self, admin_client: TestClient, test_user: dict):
        response = admin_client.get("/api/admin/users")

        assert response.status_code == 200
        users = response.json()
        assert [u["id"] for u in users] == [test_user["id"]]
        assert users[0]["usage"]["limitLabel"] == "100 GB"
        assert "password" not in users[0]

    def test_create_and_edit_plan(self, admin_client: TestClient):
        created = admin_client.post("/api/admin/users", json=user_payload())
        assert created.status_code == 200
        user_id = created.json()["id"]

        updated = admin_client.put(
            f"/api/admin/users/{user_id}",
            json=user_payload(password=None, plan="studio")
        )

        assert updated.status_code == 200
        data = updated.json()
        assert data["plan"] == "studio"
        assert data["usage"]["limitLabel"] == "Ilimitado"
        assert [p["status"] for p in data["planHistory"]] == ["inativo", "ativo"]

    def test_create_duplicate(self, admin_client: TestClient, test_user: dict):
        response = admin_client.post("/api/admin/users", json=user_payload(email=test_user["email"]))
        assert response.status_code == 409

    def test_get_missing_user(self, admin_client: TestClient):
        assert admin_client.get("/api/admin/users/missing").status_code == 404

    def test_delete_user_with_photos(self, admin_client: TestClient, test_user: dict, photo_repo, user_repo):
        photo_repo.add(new_photo(test_user["id"], "a.jpg", 10, "image/jpeg"))
        photo_repo.add(new_photo("someone-else", "b.jpg", 10, "image/jpeg"))

        response = admin_client.delete(f"/api/admin/users/{test_user['id']}")

        assert response.json() == {"status": "ok", "deletedPhotos": 1, "remoteFailures": 0}
        assert user_repo.get_by_id(test_user["id"]) is None
        assert [p["name"] for p in photo_repo.list()] == ["b.jpg"]

    def test_partial_edit_keeps_plan(self, admin_client: TestClient):
        created = admin_client.post(
            "/api/admin/users",
            json=user_payload(plan="studio", plan_type="anual", payment_method="cartao")
        ).json()

        response = admin_client.put(
            f"/api/admin/users/{created['id']}", json={"telefone": "27 90000-1111"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["telefone"] == "27 90000-1111"
        assert data["plan"] == "studio"
        assert data["planType"] == "anual"
        assert data["paymentMethod"] == "cartao"
        assert data["accountStatus"] == "ativo"
        assert len(data["planHistory"]) == 1
