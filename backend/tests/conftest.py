import os
import sys
import pytest

# Ensure the backend root (containing the `motm` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from motm import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ADMIN_PASSWORD = 'letmein'
    BCRYPT_LOG_ROUNDS = 4
    CORS_ORIGINS = ['http://localhost:5173']
    DEFAULT_TEAM_NAME = 'Weysiders'
    DEFAULT_CLUB_NAME = 'Guildford Hockey Club'
    VOTE_UPSERT_RETRIES = 3
    STRICT_MOMENT_REFERENCES = False
    RESTRICT_TO_TEAM_SHEET = False


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import motm.models  # noqa: F401
        db.create_all()
    # No context stays pushed: each test-client request gets its own
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    """Push an app context for tests that call the services directly."""
    with flask_app.app_context():
        yield flask_app
        db.session.remove()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def admin_client(flask_app):
    test_client = flask_app.test_client()
    res = test_client.post('/api/admin/login', json={'password': 'letmein'})
    assert res.status_code == 200
    return test_client


@pytest.fixture()
def game(app_ctx):
    from motm.services.voting import create_game
    return create_game(
        date='2025-09-13',
        opponents='Wimbledon 3s',
        team_sheet=['Alice', 'Bob', 'Cara', 'Dev'],
        moments=['Reverse-stick goal', 'Goal-line clearance', 'Penalty stroke save'],
    )
