" PyTest Config. This contains global-level pytest fixtures. "
import os
import os.path
import tempfile

import pytest
from flask import g
from flask_login import FlaskLoginClient

from main import create_app, db as db_obj
from tests._utils import create_user

if "PROMETHEUS_MULTIPROC_DIR" not in os.environ:
    os.environ["PROMETHEUS_MULTIPROC_DIR"] = tempfile.mkdtemp(prefix="cfp_test_prometheus")


@pytest.fixture(scope="module")
def app():
    """Fixture to provide an instance of the app.
    This will also create a Flask app_context and tear it down.

    This fixture is scoped to the module level to avoid recreating
    the schema for every test.
    """
    if "SETTINGS_FILE" not in os.environ:
        root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
        os.environ["SETTINGS_FILE"] = os.path.join(root, "config", "test.cfg")

    app = create_app(dev_server=True)
    app.test_client_class = FlaskLoginClient

    # Requests share the app context pushed below, and with it flask.g where
    # Flask-Login caches the current user. Load the user afresh every request.
    @app.teardown_request
    def forget_current_user(exc):
        g.pop("_login_user", None)

    with app.app_context():
        db_obj.create_all()

        yield app

        db_obj.session.close()
        db_obj.drop_all()


@pytest.fixture
def client(app):
    "Yield an anonymous test HTTP client for the app"
    yield app.test_client()


@pytest.fixture
def login(app):
    "Return a function giving a test HTTP client logged in as the given user"

    def client_for(user):
        return app.test_client(user=user)

    return client_for


@pytest.fixture(scope="module")
def db(app):
    "Yield the DB object"
    yield db_obj


@pytest.fixture(scope="module")
def user(db):
    "Yield a test user. Note that this user will be identical across all tests in a module."
    yield create_user(name="Test User")
