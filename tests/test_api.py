from __future__ import annotations

import io

import pytest

from daycare_membership.container import Container
from daycare_membership.core.exceptions import StorageError
from daycare_membership.main import create_app
from daycare_membership.members.model import Admin
from daycare_membership.payments.storage import LocalProofStorage


@pytest.fixture
def app(monkeypatch, tmp_path, members_repo, attendance_repo, payments_repo, ledger, attendance_service, payment_service):
    monkeypatch.setenv("APP_ENV", "testing")
    members_repo.admins.append(Admin(admin_id=100, name="Boss", email="boss@example.com"))
    container = Container(
        members_repo=members_repo,
        attendance_repo=attendance_repo,
        payments_repo=payments_repo,
        ledger=ledger,
        attendance_service=attendance_service,
        payment_service=payment_service,
        proof_storage=LocalProofStorage(tmp_path / "uploads"),
        max_proof_bytes=1024,
    )
    return create_app(container)


def _login(client, user_id: int, role: str):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    _login(client, 100, "admin")
    return client


@pytest.fixture
def member_client(app, jane):
    client = app.test_client()
    _login(client, jane.member_id, "member")
    return client


def test_requires_login(app):
    resp = app.test_client().get("/api/attendance")
    assert resp.status_code == 401


def test_members_cannot_use_admin_routes(member_client):
    resp = member_client.post("/api/attendance/checkin", json={"rfidNumber": "RF123456"})
    assert resp.status_code == 403


def test_check_in_and_out_round_trip(admin_client, jane, clock):
    resp = admin_client.post("/api/attendance/checkin", json={"rfidNumber": "RF123456"})
    assert resp.status_code == 201
    assert resp.get_json()["attendance"]["active"] is True

    clock.advance(minutes=150)
    resp = admin_client.put("/api/attendance/checkout", json={"rfidNumber": "RF123456"})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["attendance"]["hoursSpent"] == 2.5
    assert body["member"]["totalHoursUsed"] == 2.5
    assert body["member"]["remainingHours"] == 7.5


def test_rule_violations_carry_specific_reason(admin_client, jane):
    admin_client.post("/api/attendance/checkin", json={"rfidNumber": "RF123456"})
    resp = admin_client.post("/api/attendance/checkin", json={"rfidNumber": "RF123456"})

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "already_checked_in"
    assert resp.get_json()["msg"] == "Member already checked in"


def test_unknown_rfid_is_404(admin_client):
    resp = admin_client.put("/api/attendance/checkout", json={"rfidNumber": "ZZ000000"})
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "not_found"


def test_missing_rfid_is_400(admin_client):
    resp = admin_client.post("/api/attendance/checkin", json={})
    assert resp.status_code == 400


def test_current_and_stats(admin_client, jane):
    admin_client.post("/api/attendance/checkin", json={"rfidNumber": "RF123456"})

    current = admin_client.get("/api/attendance/current").get_json()
    stats = admin_client.get("/api/attendance/stats").get_json()

    assert [r["rfidNumber"] for r in current] == ["RF123456"]
    assert stats["presentCount"] == 1
    assert stats["lastCheckIn"]["memberName"] == "Jane Smith"


def test_member_sees_only_own_history(member_client, members_repo, jane):
    other = members_repo.add(name="Bob", email="bob@example.com", rfid_number="RF222222")

    assert member_client.get(f"/api/attendance/member/{jane.member_id}").status_code == 200
    assert member_client.get(f"/api/attendance/member/{other.member_id}").status_code == 403


def test_payment_submit_and_approve(member_client, admin_client, jane):
    resp = member_client.post(
        "/api/payments",
        data={"amount": "50", "hoursRequested": "10", "paymentProof": (io.BytesIO(b"img"), "receipt.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 201
    payment = resp.get_json()
    assert payment["status"] == "pending"
    assert payment["paymentProofImage"].endswith("receipt.png")

    resp = admin_client.put(f"/api/payments/{payment['id']}/approve")
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["payment"]["status"] == "approved"
    assert body["payment"]["approvedBy"] == 100
    assert body["member"]["membershipHours"] == 20.0

    resp = admin_client.put(f"/api/payments/{payment['id']}/approve")
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "already_processed"


def test_payment_without_proof_is_rejected(member_client):
    resp = member_client.post(
        "/api/payments",
        data={"amount": "50", "hoursRequested": "10"},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "missing_proof"


def test_payment_with_bad_amount_is_rejected_before_upload(member_client, tmp_path):
    resp = member_client.post(
        "/api/payments",
        data={"amount": "0", "hoursRequested": "10", "paymentProof": (io.BytesIO(b"img"), "receipt.png")},
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "invalid_amount"
    assert not (tmp_path / "uploads").exists()


def test_admins_cannot_submit_payments(admin_client):
    resp = admin_client.post("/api/payments", data={"amount": "50", "hoursRequested": "10"})
    assert resp.status_code == 403


def test_reject_and_list_payments(member_client, admin_client, jane):
    member_client.post(
        "/api/payments",
        data={"amount": "20", "hoursRequested": "4", "paymentProof": (io.BytesIO(b"%PDF"), "r.pdf")},
        content_type="multipart/form-data",
    )

    resp = admin_client.put("/api/payments/1/reject")
    assert resp.get_json()["status"] == "rejected"

    assert len(admin_client.get("/api/payments").get_json()) == 1
    assert admin_client.get("/api/payments?status=pending").get_json() == []
    assert admin_client.get("/api/payments?status=bogus").status_code == 400
    assert len(member_client.get(f"/api/payments/member/{jane.member_id}").get_json()) == 1


def test_create_member_and_add_hours(admin_client):
    resp = admin_client.post(
        "/api/users/members",
        json={"name": "Kid One", "email": "kid@example.com", "rfidNumber": "KD000001", "membershipHours": 3},
    )
    assert resp.status_code == 201
    member_id = resp.get_json()["member"]["id"]

    resp = admin_client.put(f"/api/users/members/{member_id}/hours", json={"hoursToAdd": 2})
    assert resp.get_json()["membershipHours"] == 5.0

    resp = admin_client.put(f"/api/users/members/{member_id}/hours", json={"hoursToAdd": 0})
    assert resp.status_code == 400


def test_create_member_with_bad_rfid(admin_client):
    resp = admin_client.post(
        "/api/users/members",
        json={"name": "Kid", "email": "kid@example.com", "rfidNumber": "12345678"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "invalid_rfid"


def test_deactivate_member_blocks_check_in(admin_client, jane):
    resp = admin_client.put(f"/api/users/members/{jane.member_id}", json={"isActive": False})
    assert resp.get_json()["isActive"] is False

    resp = admin_client.post("/api/attendance/checkin", json={"rfidNumber": "RF123456"})
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "inactive_member"


def test_users_listing_includes_both_roles(admin_client, jane):
    roles = sorted(a["role"] for a in admin_client.get("/api/users").get_json())
    assert roles == ["admin", "member"]


def test_balance_visible_to_owner(member_client, jane):
    body = member_client.get(f"/api/users/members/{jane.member_id}/balance").get_json()
    assert body["remainingHours"] == 10.0


def test_payment_for_unknown_member_leaves_no_file(app, tmp_path):
    client = app.test_client()
    _login(client, 999, "member")

    resp = client.post(
        "/api/payments",
        data={"amount": "50", "hoursRequested": "10", "paymentProof": (io.BytesIO(b"img"), "p.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 404
    uploads = tmp_path / "uploads"
    assert not uploads.exists() or list(uploads.iterdir()) == []


def test_failed_submit_removes_stored_proof(member_client, payment_service, payments_repo, monkeypatch, tmp_path):
    def failing_submit(**kwargs):
        raise StorageError("Database operation failed")

    monkeypatch.setattr(payment_service, "submit", failing_submit)

    resp = member_client.post(
        "/api/payments",
        data={"amount": "50", "hoursRequested": "10", "paymentProof": (io.BytesIO(b"img"), "p.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 500
    assert list((tmp_path / "uploads").iterdir()) == []
    assert payments_repo.requests == {}


def test_member_updates_own_profile(member_client, jane):
    resp = member_client.put(
        "/api/users/profile",
        json={"name": "Jane Doe", "phone": " 555-0100 ", "email": "other@example.com", "membershipHours": 99},
    )
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["id"] == jane.member_id
    assert body["name"] == "Jane Doe"
    assert body["phone"] == "555-0100"
    assert body["email"] == "jane@example.com"
    assert body["membershipHours"] == 10.0


def test_admin_updates_own_profile(admin_client):
    resp = admin_client.put("/api/users/profile", json={"address": "1 Main St"})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["role"] == "admin"
    assert body["address"] == "1 Main St"


def test_profile_update_requires_login(app):
    resp = app.test_client().put("/api/users/profile", json={"name": "X"})
    assert resp.status_code == 401
