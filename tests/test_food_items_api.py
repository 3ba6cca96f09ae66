import pytest

from zerospoil.services.firestore_service import FirestoreServiceError

MILK = {
    "name": "Milk",
    "category": "dairy",
    "purchase_date": "2026-10-10",
    "expiration_date": "2026-10-17",
    "storage_location": "fridge",
    "quantity": 1,
    "unit": "l",
}


@pytest.mark.parametrize("method,path", [
    ("get", "/api/food-items"),
    ("post", "/api/food-items"),
    ("get", "/api/food-items/f1"),
    ("put", "/api/food-items/f1"),
    ("delete", "/api/food-items/f1"),
])
def test_requires_signed_in_user(client, signed_out, method, path):
    response = getattr(client, method)(path)

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}

def test_list_food_items_with_filters(client, signed_in, mock_firestore):
    mock_firestore.list_food_items.return_value = [{"id": "f1", "name": "Milk"}]

    response = client.get("/api/food-items", params={"status": "fresh", "category": "dairy"})

    assert response.status_code == 200
    assert response.json() == {"data": [{"id": "f1", "name": "Milk"}]}
    mock_firestore.list_food_items.assert_called_once_with("user-123", "fresh", "dairy", None)

def test_list_food_items_failure(client, signed_in, mock_firestore):
    mock_firestore.list_food_items.side_effect = FirestoreServiceError("Failed to fetch food items")

    response = client.get("/api/food-items")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch food items"}

@pytest.mark.parametrize("missing", ["name", "category", "purchase_date", "storage_location", "quantity", "unit"])
def test_create_food_item_missing_fields(client, signed_in, mock_firestore, missing):
    body = {key: value for key, value in MILK.items() if key != missing}

    response = client.post("/api/food-items", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
    mock_firestore.create_food_item.assert_not_called()

def test_create_food_item_invalid_date(client, signed_in, mock_firestore):
    response = client.post("/api/food-items", json={**MILK, "purchase_date": "last tuesday"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid food item"}
    mock_firestore.create_food_item.assert_not_called()

def test_create_food_item(client, signed_in, mock_firestore):
    mock_firestore.create_food_item.return_value = {"id": "f1", **MILK, "status": "fresh"}

    response = client.post("/api/food-items", json={**MILK, "status": "expired"})

    assert response.status_code == 201
    assert response.json()["data"]["status"] == "fresh"
    user_id, data = mock_firestore.create_food_item.call_args.args
    assert user_id == "user-123"
    assert data["name"] == "Milk"
    assert data["quantity"] == 1
    assert "status" not in data

def test_get_food_item(client, signed_in, mock_firestore):
    mock_firestore.get_food_item.return_value = {"id": "f1", **MILK}

    response = client.get("/api/food-items/f1")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == "f1"
    mock_firestore.get_food_item.assert_called_once_with("user-123", "f1")

def test_get_food_item_not_found(client, signed_in, mock_firestore):
    mock_firestore.get_food_item.return_value = None

    response = client.get("/api/food-items/other-users-item")

    assert response.status_code == 404
    assert response.json() == {"error": "Food item not found"}

def test_update_food_item_writes_only_sent_fields(client, signed_in, mock_firestore):
    mock_firestore.update_food_item.return_value = {"id": "f1", **MILK, "status": "expiring_soon"}

    response = client.put("/api/food-items/f1", json={"status": "expiring_soon", "quantity": 0.5})

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "expiring_soon"
    mock_firestore.update_food_item.assert_called_once_with(
        "user-123", "f1", {"status": "expiring_soon", "quantity": 0.5}
    )

def test_update_food_item_not_found(client, signed_in, mock_firestore):
    mock_firestore.update_food_item.return_value = None

    response = client.put("/api/food-items/missing", json={"name": "Oat milk"})

    assert response.status_code == 404
    assert response.json() == {"error": "Food item not found"}

def test_update_food_item_rejects_unknown_status(client, signed_in, mock_firestore):
    response = client.put("/api/food-items/f1", json={"status": "rotten"})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    mock_firestore.update_food_item.assert_not_called()

def test_delete_food_item(client, signed_in, mock_firestore):
    mock_firestore.delete_food_item.return_value = True

    response = client.delete("/api/food-items/f1")

    assert response.status_code == 200
    assert response.json() == {"message": "Food item deleted successfully"}
    mock_firestore.delete_food_item.assert_called_once_with("user-123", "f1")

def test_delete_food_item_not_found(client, signed_in, mock_firestore):
    mock_firestore.delete_food_item.return_value = False

    response = client.delete("/api/food-items/missing")

    assert response.status_code == 404
