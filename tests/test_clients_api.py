"""Client and claim record endpoints."""

from datetime import date

from claimdesk.models import Client, Record


def test_create_client_normalizes_phone(client):
    response = client.post("/api/clients", json={"name": "Jane Doe", "phone": "123-456-7890"})

    assert response.status_code == 201
    body = response.get_json()
    assert body["phone"] == "1234567890"
    assert body["name"] == "Jane Doe"
    assert body["premium"] == 0
    assert body["expiryDate"] is None
    assert Client.get_by_id(body["id"]).phone == "1234567890"


def test_create_client_accepts_numeric_phone(client):
    response = client.post("/api/clients", json={"name": "Numeric", "phone": 1234567890})

    assert response.status_code == 201
    assert response.get_json()["phone"] == "1234567890"


def test_create_client_rejects_short_phone(client):
    response = client.post("/api/clients", json={"name": "Jane Doe", "phone": "12345"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "Phone number is required and must be 10 digits"
    assert Client.query.count() == 0


def test_create_client_requires_name(client):
    response = client.post("/api/clients", json={"name": "   ", "phone": "1234567890"})

    assert response.status_code == 400
    assert "name" in response.get_json()["fields"]


def test_create_client_requires_phone(client):
    response = client.post("/api/clients", json={"name": "No Phone"})

    assert response.status_code == 400
    assert "phone" in response.get_json()["fields"]


def test_negative_premium_is_rejected(client):
    response = client.post("/api/clients", json={"name": "Neg", "phone": "1234567890", "premium": -5})

    assert response.status_code == 400
    assert "premium" in response.get_json()["fields"]


def test_balance_is_derived(make_client):
    created = make_client(premium=1500, premiumPaid=400)

    assert created["balance"] == 1100


def test_blank_dates_are_stored_as_absent(make_client):
    created = make_client(startDate="", expiryDate="2027-01-31")

    assert created["startDate"] is None
    assert created["expiryDate"] == "2027-01-31"


def test_list_clients_is_name_ordered(client, make_client):
    make_client(name="Zed", phone="1111111111")
    make_client(name="Adam", phone="2222222222")
    make_client(name="Mary", phone="3333333333")

    names = [c["name"] for c in client.get("/api/clients").get_json()]

    assert names == ["Adam", "Mary", "Zed"]


def test_list_clients_with_query_ranks_matches(client, make_client):
    make_client(name="Bojo", phone="1111111111")
    make_client(name="John", phone="2222222222")
    make_client(name="Joan", phone="3333333333")
    make_client(name="Alice", phone="4444444444")

    names = [c["name"] for c in client.get("/api/clients?q=jo").get_json()]

    assert names == ["Joan", "John", "Bojo"]


def test_update_client_replaces_fields(client, make_client):
    created = make_client()

    response = client.put(f"/api/clients/{created['id']}", json={
        "name": "John Smith",
        "phone": "(071) 234-5670",
        "company": "Other Co",
        "expiryDate": "2027-06-30",
    })

    assert response.status_code == 200
    body = response.get_json()
    assert body["phone"] == "0712345670"
    assert body["company"] == "Other Co"
    assert body["premium"] == 0
    assert Client.get_by_id(created["id"]).expiry_date == date(2027, 6, 30)


def test_update_rejects_invalid_phone(client, make_client):
    created = make_client()

    response = client.put(f"/api/clients/{created['id']}", json={"name": "John", "phone": "555"})

    assert response.status_code == 400
    assert Client.get_by_id(created["id"]).phone == "0712345678"


def test_update_unknown_client_is_404(client):
    response = client.put("/api/clients/missing", json={"name": "X", "phone": "1234567890"})

    assert response.status_code == 404


def test_get_client_returns_records_by_claim_date(client, make_client):
    created = make_client()
    client.post(f"/api/clients/{created['id']}/records",
                json={"claimNumber": "LATE", "claimDate": "2026-05-01", "recordType": "Annual"})
    client.post(f"/api/clients/{created['id']}/records",
                json={"claimNumber": "EARLY", "claimDate": "2026-02-01", "recordType": "Monthly"})

    body = client.get(f"/api/clients/{created['id']}").get_json()

    assert [r["claimNumber"] for r in body["records"]] == ["EARLY", "LATE"]
    assert body["records"][0]["clientId"] == created["id"]


def test_get_unknown_client_is_404(client):
    response = client.get("/api/clients/does-not-exist")

    assert response.status_code == 404
    assert response.get_json()["error"] == "Client not found"


def test_add_record_defaults(client, make_client):
    created = make_client()

    response = client.post(f"/api/clients/{created['id']}/records",
                           json={"claimNumber": "CLM-1", "recordType": "Renewal"})

    assert response.status_code == 201
    record = response.get_json()
    assert record["status"] == "Pending"
    assert record["claimAmount"] == 0
    assert record["claimDate"] == date.today().isoformat()


def test_add_record_requires_claim_number_and_type(client, make_client):
    created = make_client()

    missing_number = client.post(f"/api/clients/{created['id']}/records", json={"recordType": "Annual"})
    missing_type = client.post(f"/api/clients/{created['id']}/records", json={"claimNumber": "CLM-2"})
    bad_status = client.post(f"/api/clients/{created['id']}/records",
                             json={"claimNumber": "CLM-3", "recordType": "Annual", "status": "Lost"})

    assert missing_number.status_code == 400
    assert missing_number.get_json()["error"] == "Claim number is required"
    assert missing_type.status_code == 400
    assert missing_type.get_json()["error"] == "Record type is required"
    assert bad_status.status_code == 400
    assert Record.query.count() == 0


def test_add_record_for_unknown_client_is_404(client):
    response = client.post("/api/clients/nope/records", json={"claimNumber": "C", "recordType": "Annual"})

    assert response.status_code == 404


def test_delete_client_cascades_records(client, make_client):
    created = make_client()
    for number in ("A", "B", "C"):
        client.post(f"/api/clients/{created['id']}/records", json={"claimNumber": number, "recordType": "Annual"})
    assert Record.query.filter_by(client_id=created["id"]).count() == 3

    response = client.delete(f"/api/clients/{created['id']}")

    assert response.status_code == 200
    assert response.get_json()["recordsDeleted"] == 3
    assert Record.query.filter_by(client_id=created["id"]).count() == 0
    assert client.get(f"/api/clients/{created['id']}").status_code == 404


def test_delete_unknown_client_is_404(client):
    assert client.delete("/api/clients/unknown").status_code == 404


def test_delete_record(client, make_client):
    created = make_client()
    record = client.post(f"/api/clients/{created['id']}/records",
                         json={"claimNumber": "A", "recordType": "Annual"}).get_json()

    response = client.delete(f"/api/records/{record['id']}")

    assert response.status_code == 200
    assert response.get_json()["message"] == "Record deleted"
    assert client.delete(f"/api/records/{record['id']}").status_code == 404


def test_aggregate_detail_merges_duplicate_rows(client, make_client):
    first = make_client(name="Jane Doe", phone="1234567890")
    second = make_client(name="jane doe", phone="123 456 7890")
    other = make_client(name="Jane Doe", phone="9999999999")
    client.post(f"/api/clients/{second['id']}/records",
                json={"claimNumber": "B", "claimDate": "2026-04-01", "recordType": "Annual"})
    client.post(f"/api/clients/{first['id']}/records",
                json={"claimNumber": "A", "claimDate": "2026-01-15", "recordType": "Annual"})
    client.post(f"/api/clients/{other['id']}/records",
                json={"claimNumber": "X", "claimDate": "2026-02-01", "recordType": "Annual"})

    merged = client.get(f"/api/clients/{second['id']}?aggregate=true").get_json()
    single = client.get(f"/api/clients/{second['id']}?aggregate=false").get_json()

    assert merged["id"] == first["id"]
    assert [r["claimNumber"] for r in merged["records"]] == ["A", "B"]
    assert single["id"] == second["id"]
    assert [r["claimNumber"] for r in single["records"]] == ["B"]
    assert Client.query.count() == 3


def test_aggregate_detail_matches_non_ascii_capitals(client, make_client):
    created = make_client(name="ÉLODIE Mwangi", phone="1234567890")
    client.post(f"/api/clients/{created['id']}/records",
                json={"claimNumber": "A", "claimDate": "2026-03-01", "recordType": "Annual"})

    single = client.get(f"/api/clients/{created['id']}").get_json()
    merged = client.get(f"/api/clients/{created['id']}?aggregate=true").get_json()

    assert [r["claimNumber"] for r in single["records"]] == ["A"]
    assert merged["id"] == created["id"]
    assert [r["claimNumber"] for r in merged["records"]] == ["A"]


def test_index_lists_endpoints(client):
    body = client.get("/").get_json()

    assert "/api/clients" in body["endpoints"]
