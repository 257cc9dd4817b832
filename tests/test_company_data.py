from shared.models.users import Users

from conftest import bearer


def test_get_company_data(client, company):
    response = client.get("/api/company/data", headers=company["headers"])

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["companyInfo"]["name"] == "Acme"
    assert data["companyInfo"]["Category"] == "Food"


def test_company_data_is_only_for_companies(client, signup):
    user = signup(email="u@x.com", user_type="user")

    response = client.get("/api/company/data", headers=bearer(user["token"]))

    assert response.status_code == 404
    assert response.json()["message"] == "Company not found"


def test_update_contact_details(client, company, db_session):
    details = {"phone": "123", "whatsapp": "456", "website": "https://acme.test"}

    response = client.put("/api/company/data", headers=company["headers"], json=details)
    assert response.status_code == 200
    assert response.json()["message"] == "Company data updated successfully"

    db_session.expire_all()
    stored = db_session.query(Users).one()
    assert stored.company_info["details"] == [details]
    assert stored.company_info["name"] == "Acme"

    repeat = client.put("/api/company/data", headers=company["headers"], json=details)
    assert repeat.json()["message"] == "No changes made to company data"
