from __future__ import annotations

import json

from src.school_attendance.school_attendance.main import create_app

SCHOOL = "SMA NEGERI 1 PULAU BANYAK BARAT"


def login_admin(client):
    return client.post("/api/login", json={"username": "admin", "password": "admin123", "school": SCHOOL})


def login_operator(client):
    return client.post("/api/login", json={"username": "absen", "password": "absen123", "school": SCHOOL})


def test_login_and_logout(client):
    res = login_admin(client)
    assert res.status_code == 200
    assert res.get_json()["user"]["user_type"] == "admin"

    assert client.post("/api/logout").status_code == 200
    assert client.get("/api/students").status_code == 401


def test_wrong_password_is_401(client):
    res = client.post("/api/login", json={"username": "admin", "password": "nope"})
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_operator_cannot_use_admin_endpoints(client):
    assert login_operator(client).status_code == 200
    assert client.get("/api/admin/schools").status_code == 403


def test_scan_flow(client):
    login_operator(client)
    res = client.post("/api/students", json={"name": "Ani", "nis": "1001", "class_name": "X-A"})
    assert res.status_code == 201
    student = res.get_json()["student"]

    qr = json.dumps({"studentId": student["id"], "name": "Ani", "nis": "1001"})
    scan = {"qr": qr, "mode": "check-in", "date": "2025-01-06", "time": "07:31"}

    res = client.post("/api/attendance/scan", json=scan)
    assert res.status_code == 200
    body = res.get_json()
    assert body["type"] == "check-in"
    assert body["record"]["timeliness"] == "late"
    assert body["record"]["date"] == "2025-01-06"

    res = client.post("/api/attendance/scan", json=scan)
    assert res.status_code == 409
    assert "already checked in" in res.get_json()["message"]

    res = client.post("/api/attendance/scan", json={**scan, "mode": "check-out", "time": "13:00"})
    assert res.status_code == 200
    assert res.get_json()["type"] == "check-out"

    res = client.get("/api/attendance/records?month=1&year=2025")
    assert len(res.get_json()["records"]) == 1


def test_scan_rejects_old_cards_and_unknown_students(client):
    login_operator(client)
    assert client.post("/api/attendance/scan", json={"qr": '{"id": "x"}'}).status_code == 400
    assert client.post("/api/attendance/scan", json={"nis": "404"}).status_code == 404


def test_manual_attendance_and_report(client):
    login_operator(client)
    student = client.post("/api/students", json={"name": "Ani", "nis": "1001", "class_name": "X-A"}).get_json()[
        "student"
    ]

    res = client.post(
        "/api/attendance/manual",
        json={"student_id": student["id"], "date": "2025-01-08", "status": "sick"},
    )
    assert res.status_code == 200

    res = client.get("/api/attendance/report?class=X-A&month=1&year=2025")
    assert res.status_code == 200
    assert res.get_json()["rows"][0]["8"] == "S"

    res = client.get("/api/attendance/report.csv?class=X-A&month=1&year=2025")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "Ani" in res.get_data().decode("utf-8-sig")


def test_student_qr_png(client):
    login_operator(client)
    student = client.post("/api/students", json={"name": "Ani", "nis": "1001", "class_name": "X-A"}).get_json()[
        "student"
    ]

    res = client.get(f"/api/students/{student['id']}/qr")

    assert res.status_code == 200
    assert res.mimetype == "image/png"


def test_admin_manages_operators_and_password_log(client):
    login_admin(client)
    res = client.post("/api/admin/operators", json={"username": "piket", "password": "piket123", "school": SCHOOL})
    assert res.status_code == 201
    assert "password" not in res.get_json()["operator"]

    client.post("/api/logout")
    client.post("/api/login", json={"username": "piket", "password": "piket123", "school": SCHOOL})
    res = client.put("/api/operator/password", json={"current_password": "piket123", "new_password": "baru1234"})
    assert res.status_code == 200

    client.post("/api/logout")
    login_admin(client)
    entries = client.get("/api/admin/password-log").get_json()["entries"]
    assert [(e["school_name"], e["operator_username"]) for e in entries] == [(SCHOOL, "piket")]

    assert client.delete(f"/api/admin/password-log/{entries[0]['id']}").status_code == 200
    assert client.get("/api/admin/password-log").get_json()["entries"] == []


def test_disabling_attendance_blocks_scans(client):
    login_admin(client)
    res = client.put("/api/admin/attendance-enabled", json={"school": SCHOOL, "enabled": False})
    assert res.status_code == 200
    schools = client.get("/api/admin/schools").get_json()["schools"]
    assert schools == [{"name": SCHOOL, "attendance_enabled": False, "on_time_deadline": "07:30"}]

    client.post("/api/students", json={"name": "Ani", "nis": "1001", "class_name": "X-A"})
    res = client.post("/api/attendance/scan", json={"nis": "1001"})
    assert res.status_code == 400
    assert "disabled" in res.get_json()["message"]


def test_school_info_and_backup_check(client):
    login_admin(client)
    res = client.put("/api/school", json={"address": "Jl. Pantai", "headmaster": "Pak Ali"})
    assert res.status_code == 200
    assert client.get("/api/school").get_json()["school"]["headmaster"] == "Pak Ali"

    assert client.get("/api/school/backup/SMA%20BARU").get_json()["exists"] is False
    res = client.post("/api/school/rename", json={"new_name": "SMA BARU"})
    assert res.get_json()["outcome"] == "reset"
    assert client.get("/api/school/backup/" + SCHOOL.replace(" ", "%20")).get_json()["exists"] is True


def test_storage_failure_answers_503(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_ENV", "testing")
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    app = create_app({"DB_CONFIG": {"path": str(blocker / "db.sqlite3")}})
    res = app.test_client().post("/api/login", json={"username": "admin", "password": "admin123"})

    assert res.status_code == 503
    assert res.get_json() == {"success": False, "message": "cannot initialize storage"}


def test_admin_profile_round_trip(client):
    login_admin(client)
    res = client.put("/api/admin/profile", json={"full_name": "Pak Admin", "email": "admin@sekolah.id"})
    assert res.status_code == 200

    profile = client.get("/api/admin/profile").get_json()["profile"]
    assert profile == {"full_name": "Pak Admin", "email": "admin@sekolah.id", "phone": ""}


def test_report_rejects_month_zero(client):
    login_operator(client)

    res = client.get("/api/attendance/report?class=X-A&month=0&year=2025")
    assert res.status_code == 400
    assert "Month" in res.get_json()["message"]

    assert client.get("/api/attendance/report.csv?class=X-A&month=1&year=0").status_code == 400
