import os

# must be set before `models` is imported: DBStorage picks its engine at import time
os.environ["APP_ENV"] = "test"
os.environ.pop("DATABASE_URL", None)

import pytest  # noqa: E402

from api import create_app  # noqa: E402
from models import storage  # noqa: E402
from models.base_model import Base  # noqa: E402
from utils.metrics import hits  # noqa: E402

PASSWORD = "04234"


@pytest.fixture
def app():
    app = create_app("testing")
    engine = storage.get_session().get_bind()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    hits.store(0)
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    def _register(email="walt@breakingbad.com", password=PASSWORD):
        resp = client.post("/api/users", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _register


@pytest.fixture
def login(client, register):
    def _login(email="walt@breakingbad.com", password=PASSWORD):
        register(email=email, password=password)
        resp = client.post("/api/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp.get_json()

    return _login
