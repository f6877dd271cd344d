import io
import os
from unittest.mock import patch

import pytest
from PIL import Image
from werkzeug.datastructures import FileStorage

from models.audit_log import AuditLog
from models.report import Report
from services import files as files_service
from services import reports as reports_service
from utils.http_error import HttpError


def _jpeg_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), "blue").save(buf, format="JPEG")
    buf.seek(0)
    return buf


def test_create_scores_and_scrubs_description(client, citizen, auth_headers):
    resp = client.post("/api/v1/reports", headers=auth_headers(citizen), json={
        "description": "Urgent: man with a knife outside, call me on 555-123-4567",
        "longitude": 151.2, "latitude": -33.8,
    })
    data = resp.get_json()["data"]

    assert resp.status_code == 201
    assert "[REDACTED-PHONE]" in data["description"]
    assert "555-123-4567" not in data["description"]
    assert data["priority"] == 75
    assert data["status"] == "PENDING"
    assert data["user_id"] == citizen.id

    events = AuditLog.find_all_by("target_type", "incident")
    assert [e.action for e in events] == ["create"]


def test_create_with_image_sanitises_and_records_upload(client, citizen, auth_headers):
    resp = client.post(
        "/api/v1/reports",
        headers=auth_headers(citizen),
        data={"description": "Graffiti on the underpass", "images": (_jpeg_bytes(), "wall.jpg")},
        content_type="multipart/form-data",
    )
    data = resp.get_json()["data"]

    assert resp.status_code == 201
    assert len(data["images"]) == 1
    assert [e.action for e in AuditLog.find_all_by("target_type", "file")] == ["upload"]


def test_create_rolls_back_when_an_image_is_bad(app, client, citizen, auth_headers):
    resp = client.post(
        "/api/v1/reports",
        headers=auth_headers(citizen),
        data={"description": "Broken window", "images": (io.BytesIO(b"nope"), "bad.jpg")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Unsupported image"
    assert Report.all() == []
    assert os.listdir(app.config["UPLOAD_DIR"]) == []


def test_create_requires_description(client, citizen, auth_headers):
    resp = client.post("/api/v1/reports", headers=auth_headers(citizen), json={"description": "   "})
    assert resp.status_code == 400


def test_officers_see_all_reports_by_priority(app, client, make_user, officer, auth_headers):
    a, b = make_user(), make_user()
    reports_service.create(None, {"description": "noise from a party"}, a.id)
    reports_service.create(None, {"description": "shooting reported near the station"}, b.id)

    officer_view = client.get("/api/v1/reports", headers=auth_headers(officer)).get_json()["data"]
    assert [r["user_id"] for r in officer_view] == [b.id, a.id]

    citizen_view = client.get("/api/v1/reports", headers=auth_headers(a)).get_json()["data"]
    assert [r["user_id"] for r in citizen_view] == [a.id]


def test_citizen_cannot_view_someone_elses_report(client, make_user, auth_headers):
    owner, other = make_user(), make_user()
    report = reports_service.create(None, {"description": "stolen bike"}, owner.id)

    assert client.get(f"/api/v1/reports/{report['id']}", headers=auth_headers(owner)).status_code == 200
    assert client.get(f"/api/v1/reports/{report['id']}", headers=auth_headers(other)).status_code == 403


def test_get_missing_report_is_404(client, citizen, auth_headers):
    assert client.get("/api/v1/reports/999", headers=auth_headers(citizen)).status_code == 404


def test_update_status_is_officer_only(client, citizen, officer, auth_headers):
    report = reports_service.create(None, {"description": "suspicious car"}, citizen.id)
    url = f"/api/v1/reports/update-status/{report['id']}"

    assert client.patch(url, headers=auth_headers(citizen), json={"status": "CLOSED"}).status_code == 403

    resp = client.patch(url, headers=auth_headers(officer), json={"status": "IN-PROGRESS"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "IN-PROGRESS"

    bad = client.patch(url, headers=auth_headers(officer), json={"status": "DONE"})
    assert bad.status_code == 400


def test_update_status_of_missing_report(app, officer):
    with pytest.raises(HttpError) as err:
        reports_service.update_status(999, {"status": "CLOSED"}, officer.id)
    assert err.value.code == 404


def test_delete_report_records_audit_event(client, citizen, auth_headers):
    report = reports_service.create(None, {"description": "fallen tree"}, citizen.id)

    resp = client.delete(f"/api/v1/reports/{report['id']}", headers=auth_headers(citizen))
    assert resp.status_code == 204
    assert Report.find_by_id(report["id"]) is None
    assert "delete" in [e.action for e in AuditLog.find_all_by("target_type", "incident")]


def test_deleting_a_missing_report_leaves_no_audit_trail(client, officer, auth_headers):
    resp = client.delete("/api/v1/reports/999", headers=auth_headers(officer))
    assert resp.status_code == 404
    assert AuditLog.find_all_by("target_type", "incident") == []


def test_witnesses_can_be_added_and_removed(client, citizen, auth_headers):
    report = reports_service.create(None, {"description": "car crash"}, citizen.id)
    headers = auth_headers(citizen)

    added = client.post(f"/api/v1/reports/witness/{report['id']}", headers=headers,
                        json={"full_name": "  Evelyn Grant ", "contact_number": " 0400 111 222 "})
    assert added.status_code == 201
    witness = added.get_json()["data"]
    assert witness["first_name"] == "Evelyn Grant"
    assert witness["contact_number"] == "0400 111 222"

    detail = client.get(f"/api/v1/reports/{report['id']}", headers=headers).get_json()["data"]
    assert [w["id"] for w in detail["witnesses"]] == [witness["id"]]

    removed = client.delete(f"/api/v1/reports/witness/{report['id']}/{witness['id']}", headers=headers)
    assert removed.status_code == 204
    again = client.delete(f"/api/v1/reports/witness/{report['id']}/{witness['id']}", headers=headers)
    assert again.status_code == 404


def test_witness_requires_name_and_number(client, citizen, auth_headers):
    report = reports_service.create(None, {"description": "car crash"}, citizen.id)
    resp = client.post(f"/api/v1/reports/witness/{report['id']}", headers=auth_headers(citizen),
                       json={"full_name": "   ", "contact_number": "0400"})
    assert resp.status_code == 400


def test_can_user_view(app, make_user, officer):
    owner, other = make_user(), make_user()
    report = {"user_id": owner.id}
    assert reports_service.can_user_view(report, owner.id)
    assert reports_service.can_user_view(report, officer.id)
    assert not reports_service.can_user_view(report, other.id)
    assert not reports_service.can_user_view(report, 12345)


def test_image_tokens_resolve_to_stored_files(app, citizen):
    with patch("services.files.sanitize_image"):
        report = reports_service.create(
            [FileStorage(_jpeg_bytes(), filename="a.jpg")], {"description": "pothole"}, citizen.id,
        )

    path, actor = files_service.get_file_name_from_token(report["images"][0])
    assert path.startswith(app.config["UPLOAD_DIR"])
    assert actor == citizen.id
