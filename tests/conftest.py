from pathlib import Path

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def app_client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_file.as_posix()}")
    monkeypatch.setenv("AUTO_CREATE_ADMIN", "true")
    monkeypatch.setenv("BOOTSTRAP_ADMIN_LOGIN", "admin")
    monkeypatch.setenv("BOOTSTRAP_ADMIN_PASSWORD", "admin123")
    monkeypatch.setenv("BOOTSTRAP_ADMIN_NAME", "Mrs. Koelpin")
    monkeypatch.setenv("FCM_SERVICE_ACCOUNT_JSON", str(tmp_path / "missing_fcm.json"))

    from hallpass import models  # noqa: F401
    from hallpass.api.deps import reset_service_singletons
    from hallpass.core.config import clear_settings_cache
    from hallpass.db.base import Base
    from hallpass.db.session import get_engine, get_session_factory, reset_engine
    from hallpass.main import create_app
    from scripts.seed_roster import seed

    clear_settings_cache()
    reset_engine()
    reset_service_singletons()
    Base.metadata.create_all(bind=get_engine())

    with get_session_factory()() as db:
        seed(db)

    app = create_app()
    with TestClient(app) as client:
        yield client

    Base.metadata.drop_all(bind=get_engine())
    reset_engine()
    reset_service_singletons()


def auth_token(client: TestClient) -> str:
    response = client.post("/auth/login", json={"login": "admin", "password": "admin123"})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def auth_headers(client: TestClient) -> dict[str, str]:
    return {"Authorization": f"Bearer {auth_token(client)}"}


def demo_roster(client: TestClient, headers: dict[str, str]) -> tuple[str, dict[str, str]]:
    """Class id of the seeded demo class and its students keyed by first name."""
    classes = client.get("/classes", headers=headers).json()
    class_id = next(item["id"] for item in classes if item["class_code"] == "DEMO2024")
    students = client.get(f"/classes/{class_id}/students", headers=headers).json()
    return class_id, {student["first_name"]: student["id"] for student in students}
