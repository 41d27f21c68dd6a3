from __future__ import annotations

from bson import ObjectId

LOGO = {"file": ("logo.png", b"\x89PNG logo bytes", "image/png")}


def test_register_company(client, db, recruiter) -> None:
    resp = client.post("/api/v1/company/register", json={"companyName": "Acme Corp"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Company registered successfully."
    assert body["company"]["name"] == "Acme Corp"
    assert body["company"]["userId"] == recruiter["_id"]
    assert ObjectId.is_valid(body["company"]["_id"])


def test_register_company_requires_name(client, db, recruiter) -> None:
    resp = client.post("/api/v1/company/register", json={"companyName": ""})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Company name is required.", "success": False}
    assert db["companies"].count_documents({}) == 0


def test_register_company_duplicate_name(client, db, company) -> None:
    resp = client.post("/api/v1/company/register", json={"companyName": "Acme Corp"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "You can't register the same company."
    assert db["companies"].count_documents({}) == 1


def test_company_name_match_is_case_sensitive(client, db, company) -> None:
    resp = client.post("/api/v1/company/register", json={"companyName": "ACME CORP"})
    assert resp.status_code == 201
    assert db["companies"].count_documents({}) == 2


def test_register_company_requires_login(client, db) -> None:
    resp = client.post("/api/v1/company/register", json={"companyName": "Acme Corp"})
    assert resp.status_code == 401
    assert db["companies"].count_documents({}) == 0


def test_get_companies_lists_only_own(client, make_user, login, company) -> None:
    resp = client.get("/api/v1/company")
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()["companies"]] == ["Acme Corp"]

    login(make_user("recruiter"))
    resp = client.get("/api/v1/company")
    assert resp.status_code == 404
    assert resp.json() == {"message": "No companies found for this user.", "success": False}


def test_get_company_by_id(client, company) -> None:
    resp = client.get(f"/api/v1/company/{company['_id']}")
    assert resp.status_code == 200
    assert resp.json()["company"]["name"] == "Acme Corp"


def test_get_company_unknown_or_malformed_id(client, recruiter) -> None:
    assert client.get(f"/api/v1/company/{ObjectId()}").status_code == 404
    assert client.get("/api/v1/company/not-an-id").status_code == 404


def test_update_company_with_logo(client, company, media) -> None:
    resp = client.put(
        f"/api/v1/company/{company['_id']}",
        data={"description": "We make everything", "website": "https://acme.test", "location": "Pune"},
        files=LOGO,
    )
    assert resp.status_code == 200
    updated = resp.json()["company"]
    assert updated["logo"] == "https://media.test/1"
    assert updated["location"] == "Pune"
    assert updated["name"] == "Acme Corp"
    assert media.uploads[0].content.startswith("data:image/png;base64,")


def test_update_company_requires_logo(client, company) -> None:
    resp = client.put(f"/api/v1/company/{company['_id']}", data={"location": "Pune"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Logo file is required.", "success": False}


def test_update_company_unknown_id(client, recruiter, media) -> None:
    resp = client.put(f"/api/v1/company/{ObjectId()}", data={"location": "Pune"}, files=LOGO)
    assert resp.status_code == 404
    assert media.uploads == []


def test_update_company_rejects_oversized_logo(client, company, media) -> None:
    big = b"\0" * (5 * 1024 * 1024 + 1)
    resp = client.put(f"/api/v1/company/{company['_id']}", files={"file": ("logo.png", big, "image/png")})
    assert resp.status_code == 400
    assert resp.json() == {"message": "File size is too large. Max limit is 5MB", "success": False}
    assert media.uploads == []


def test_update_company_by_other_user_allowed_by_default(client, make_user, login, company) -> None:
    login(make_user("recruiter"))
    resp = client.put(f"/api/v1/company/{company['_id']}", data={"location": "Goa"}, files=LOGO)
    assert resp.status_code == 200


def test_update_company_ownership_enforced_when_enabled(client, make_user, login, company, monkeypatch) -> None:
    from app.core.config import get_settings

    monkeypatch.setattr(get_settings(), "enforce_company_ownership", True)
    login(make_user("recruiter"))
    resp = client.put(f"/api/v1/company/{company['_id']}", data={"location": "Goa"}, files=LOGO)
    assert resp.status_code == 403
    assert resp.json()["success"] is False


def test_update_company_rename_to_taken_name(client, db, company, media) -> None:
    other = client.post("/api/v1/company/register", json={"companyName": "Beta Labs"}).json()["company"]
    resp = client.put(f"/api/v1/company/{other['_id']}", data={"name": "Acme Corp"}, files=LOGO)
    assert resp.status_code == 400
    assert resp.json() == {"message": "A company with this name already exists.", "success": False}
    assert db["companies"].find_one({"_id": ObjectId(other["_id"])})["name"] == "Beta Labs"
    assert media.uploads == []


def test_update_company_keeps_own_name(client, company) -> None:
    resp = client.put(f"/api/v1/company/{company['_id']}", data={"name": "Acme Corp"}, files=LOGO)
    assert resp.status_code == 200
    assert resp.json()["company"]["name"] == "Acme Corp"
