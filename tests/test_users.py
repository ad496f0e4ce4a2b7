from sqlalchemy.orm import Session

from app.db.models.user import User as UserModel


def create_user(client, **overrides) -> dict:
    payload = {"name": "Ana Lima", "email": "ana@example.com", "document": "111"}
    payload.update(overrides)
    response = client.post("/api/v1/users", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def create_vehicle(client, plate: str = "ABC1234") -> dict:
    response = client.post(
        "/api/v1/vehicles",
        json={"license_plate": plate, "brand": "Toyota", "model": "Corolla", "year": 2022},
    )
    assert response.status_code == 201, response.text
    return response.json()


# ============================================================================
# CREATE USER TESTS
# ============================================================================


def test_create_user_success(client, db: Session):
    """Test a customer is created with a normalized email."""
    data = create_user(client, email="  Ana.Lima@Example.COM ")

    assert data["email"] == "ana.lima@example.com"
    assert data["type"] == "customer"
    assert data["is_active"] is True
    assert data["rented_vehicles_count"] == 0

    row = db.query(UserModel).filter(UserModel.id == data["id"]).first()
    assert row is not None
    assert row.email == "ana.lima@example.com"


def test_create_user_duplicate_email_conflict(client):
    """Test emails differing only by case are duplicates."""
    create_user(client)
    response = client.post(
        "/api/v1/users",
        json={"name": "Other", "email": "ANA@EXAMPLE.COM", "document": "222"},
    )
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_create_user_invalid_email(client):
    response = client.post(
        "/api/v1/users", json={"name": "Ana", "email": "ana-at-example", "document": "1"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_create_user_invalid_type(client):
    """Test unknown user types are rejected by request validation."""
    response = client.post(
        "/api/v1/users",
        json={"name": "Ana", "email": "ana@example.com", "document": "1", "type": "tenant"},
    )
    assert response.status_code == 422


# ============================================================================
# GET USER TESTS
# ============================================================================


def test_get_user_by_id(client):
    user = create_user(client)
    response = client.get(f"/api/v1/users/{user['id']}")
    assert response.status_code == 200
    assert response.json()["email"] == "ana@example.com"


def test_get_user_not_found(client):
    response = client.get("/api/v1/users/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"detail": "User not found", "code": "NOT_FOUND"}


def test_get_user_by_email_and_document(client):
    user = create_user(client)

    response = client.get("/api/v1/users/by-email/ANA@example.com")
    assert response.status_code == 200
    assert response.json()["id"] == user["id"]

    response = client.get("/api/v1/users/by-document/111")
    assert response.status_code == 200
    assert response.json()["id"] == user["id"]


def test_list_users_with_filters(client):
    customer = create_user(client)
    employee = create_user(
        client, name="Eve", email="eve@example.com", document="222", type="employee"
    )

    response = client.get("/api/v1/users")
    assert response.status_code == 200
    assert {u["id"] for u in response.json()} == {customer["id"], employee["id"]}

    response = client.get("/api/v1/users", params={"type": "employee"})
    assert [u["id"] for u in response.json()] == [employee["id"]]

    client.patch(f"/api/v1/users/{employee['id']}/deactivate")
    response = client.get("/api/v1/users", params={"active": "true"})
    assert [u["id"] for u in response.json()] == [customer["id"]]


# ============================================================================
# UPDATE / ACTIVATION TESTS
# ============================================================================


def test_update_user(client):
    user = create_user(client)
    response = client.put(f"/api/v1/users/{user['id']}", json={"name": "Ana Maria"})
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Ana Maria"
    assert data["email"] == "ana@example.com"
    assert data["updated_at"] is not None


def test_update_user_email_taken(client):
    create_user(client)
    other = create_user(client, name="Bob", email="bob@example.com", document="222")
    response = client.put(f"/api/v1/users/{other['id']}", json={"email": "Ana@Example.com"})
    assert response.status_code == 409


def test_deactivate_and_activate_user(client):
    user = create_user(client)

    response = client.patch(f"/api/v1/users/{user['id']}/deactivate")
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    response = client.patch(f"/api/v1/users/{user['id']}/activate")
    assert response.status_code == 200
    assert response.json()["is_active"] is True


# ============================================================================
# RENTAL TESTS
# ============================================================================


def test_rent_and_return_vehicle(client):
    user = create_user(client)
    vehicle = create_vehicle(client)

    response = client.post(f"/api/v1/users/{user['id']}/rentals/{vehicle['id']}")
    assert response.status_code == 200
    assert response.json()["status"] == "rented"
    assert response.json()["renter_id"] == user["id"]

    response = client.get(f"/api/v1/users/{user['id']}/rentals")
    assert [v["id"] for v in response.json()] == [vehicle["id"]]

    response = client.delete(f"/api/v1/users/{user['id']}/rentals/{vehicle['id']}")
    assert response.status_code == 200
    assert response.json()["status"] == "available"

    response = client.get(f"/api/v1/users/{user['id']}/rentals")
    assert response.json() == []


def test_rent_unavailable_vehicle(client):
    user = create_user(client)
    vehicle = create_vehicle(client)
    client.post(f"/api/v1/users/{user['id']}/rentals/{vehicle['id']}")

    other = create_user(client, name="Bob", email="bob@example.com", document="222")
    response = client.post(f"/api/v1/users/{other['id']}/rentals/{vehicle['id']}")
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATE"


def test_deactivate_user_with_rentals(client):
    user = create_user(client)
    vehicle = create_vehicle(client)
    client.post(f"/api/v1/users/{user['id']}/rentals/{vehicle['id']}")

    response = client.patch(f"/api/v1/users/{user['id']}/deactivate")
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATE"


# ============================================================================
# DELETE USER TESTS
# ============================================================================


def test_delete_user(client, db: Session):
    user = create_user(client)
    response = client.delete(f"/api/v1/users/{user['id']}")
    assert response.status_code == 204
    assert db.query(UserModel).filter(UserModel.id == user["id"]).first() is None


def test_delete_user_with_rentals_conflict(client):
    user = create_user(client)
    vehicle = create_vehicle(client)
    client.post(f"/api/v1/users/{user['id']}/rentals/{vehicle['id']}")

    response = client.delete(f"/api/v1/users/{user['id']}")
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"
