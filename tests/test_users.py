import json

import pytest

from shared.models.users import Users

from conftest import bearer

PNG = ("photo.png", b"png-bytes", "image/png")


@pytest.fixture
def provider(signup):
    data = signup(email="sp@x.com", user_type="serviceProvider",
                  serviceProviderInfo={"serviceType": "Plumbing", "yearsExperience": 4})
    return {"id": data["user"]["id"], "headers": bearer(data["token"])}


def stored(db_session, email):
    db_session.expire_all()
    return db_session.query(Users).filter(Users.email == email).one()


class TestProfile:

    def test_profile_hides_credentials(self, client, company, db_session):
        user = stored(db_session, "a@x.com")
        user.otp_info = {"otp": "123456", "expiresAt": "2030-01-01T00:00:00+00:00"}
        db_session.commit()

        response = client.get("/api/users/profile", headers=company["headers"])

        profile = response.json()["data"]
        assert profile["id"] == company["id"]
        assert profile["companyInfo"]["name"] == "Acme"
        assert "password" not in profile
        assert "otpInfo" not in profile
        assert "resetPasswordToken" not in profile

    def test_update_applies_present_fields_only(self, client, company, db_session):
        response = client.put("/api/users/profile", headers=company["headers"],
                              json={"gender": "female", "fullName": "", "phone": "555"})

        assert response.status_code == 200
        user = stored(db_session, "a@x.com")
        assert user.gender == "female"
        assert user.phone == "555"
        assert user.full_name == "Test Account"

    def test_company_info_edit_keeps_branches(self, client, company, db_session):
        client.post("/api/company/branches", data={"data": json.dumps({"name": "Main"})},
                    headers=company["headers"])

        client.put("/api/users/profile", headers=company["headers"],
                   json={"companyInfo": {"name": "Acme 2", "Category": "Retail"}})

        info = stored(db_session, "a@x.com").company_info
        assert info["name"] == "Acme 2"
        assert [b["name"] for b in info["branches"]] == ["Main"]

    def test_other_category_needs_custom_value(self, client, company):
        response = client.put("/api/users/profile", headers=company["headers"],
                              json={"companyInfo": {"name": "Acme", "Category": "Other"}})

        assert response.status_code == 400
        assert response.json()["message"] == "Please specify your Category type"

    def test_other_service_type_needs_custom_value(self, client, provider):
        response = client.put("/api/users/profile", headers=provider["headers"],
                              json={"serviceProviderInfo": {"serviceType": "Other"}})

        assert response.status_code == 400
        assert response.json()["message"] == "Please specify your service type"

    def test_update_location(self, client, company, db_session):
        response = client.put("/api/users/location", headers=company["headers"],
                              json={"location": {"city": "Beirut", "lat": 33.9, "lng": 35.5}})

        assert response.status_code == 200
        assert stored(db_session, "a@x.com").location["city"] == "Beirut"

        missing = client.post("/api/save-locations", headers=company["headers"], json={})
        assert missing.status_code == 400
        assert missing.json()["message"] == "Location is required"


class TestUploads:

    def test_company_logo_upload_replaces_previous(self, client, company, store, db_session):
        first = client.post("/api/upload-logo", headers=company["headers"],
                            files={"logo": PNG}).json()["data"]["logoURL"]
        second = client.post("/api/company/logo", headers=company["headers"],
                             files={"logo": PNG}).json()["data"]["logoURL"]

        assert first.startswith("uploads/logos/")
        assert not store.resolve(first).exists()
        assert store.resolve(second).exists()
        assert stored(db_session, "a@x.com").company_info["logo"] == second

    def test_logo_must_be_an_image(self, client, company):
        response = client.post("/api/upload-logo", headers=company["headers"],
                               files={"logo": ("notes.txt", b"text", "text/plain")})

        assert response.status_code == 400
        assert response.json()["message"] == "Only image files are allowed"

    def test_logo_requires_a_file(self, client, company):
        response = client.post("/api/upload-logo", headers=company["headers"])

        assert response.status_code == 400

    def test_plain_user_cannot_use_company_logo_route(self, client, signup):
        user = signup(email="u@x.com", user_type="user")

        response = client.post("/api/company/logo", headers=bearer(user["token"]),
                               files={"logo": PNG})

        assert response.status_code == 403

    def test_profile_photo_for_service_provider(self, client, provider, store, db_session):
        response = client.post("/api/service-provider/photo", headers=provider["headers"],
                               files={"photo": PNG})

        photo = response.json()["data"]["photoURL"]
        assert photo.startswith("uploads/profiles/")
        assert store.resolve(photo).exists()
        assert stored(db_session, "sp@x.com").service_provider_info["profilePhoto"] == photo

    def test_profile_photo_rejected_for_company(self, client, company):
        response = client.post("/api/upload-profile-photo", headers=company["headers"],
                               files={"photo": PNG})

        assert response.status_code == 400


class TestAvailability:

    def test_update_availability(self, client, provider, db_session):
        response = client.post("/api/update-availability", headers=provider["headers"],
                               json={"availableDays": ["Mon"], "availableHours": ["9-5"]})

        assert response.status_code == 200
        info = stored(db_session, "sp@x.com").service_provider_info
        assert info["availableDays"] == ["Mon"]
        assert info["serviceType"] == "Plumbing"

    def test_days_and_hours_are_required(self, client, provider):
        response = client.post("/api/service-provider/availability", headers=provider["headers"],
                               json={"availableDays": ["Mon"]})

        assert response.status_code == 400


class TestAccountRemoval:

    def test_delete_account_cleans_up_files(self, client, company, store, db_session):
        logo = client.post("/api/upload-logo", headers=company["headers"],
                           files={"logo": PNG}).json()["data"]["logoURL"]
        branch = client.post("/api/company/branches", headers=company["headers"],
                             data={"data": json.dumps({"name": "Main"})},
                             files=[("images", PNG)]).json()["data"]

        response = client.delete("/api/users", headers=company["headers"])

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.query(Users).count() == 0
        assert not store.resolve(logo).exists()
        assert not store.resolve(branch["images"][0]).exists()

        again = client.get("/api/users/profile", headers=company["headers"])
        assert again.status_code == 404


def test_companies_with_locations(client, signup):
    located = signup(email="c1@x.com", location={"city": "Tyre"})
    signup(email="c2@x.com")
    visitor = signup(email="u@x.com", user_type="user", location={"city": "Sidon"})

    response = client.get("/api/user/companies", headers=bearer(visitor["token"]))

    companies = response.json()["data"]
    assert [c["id"] for c in companies] == [located["user"]["id"]]
    assert "password" not in companies[0]
