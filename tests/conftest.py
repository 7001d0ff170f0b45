import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient

from csa.app import create_app
from csa.config import Settings


@pytest.fixture()
def users_file(tmp_path: Path) -> Path:
    """
    Write a small users.yml:
      - ada (id 1)
      - grace (id 2)
    """
    path = tmp_path / "data" / "users.yml"
    path.parent.mkdir(parents=True, exist_ok=True)
    raw = {"version": 1, "users": {"ada": {"id": 1}, "grace": {"id": 2}}}
    path.write_text(yaml.safe_dump(raw, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture()
def settings(users_file: Path) -> Settings:
    return Settings(secret_key="test-secret", users_path=users_file)


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)
