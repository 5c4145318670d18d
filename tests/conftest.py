import pytest

import database
from user_profile import default_profile


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = str(tmp_path / 'data' / 'jobs.db')
    monkeypatch.setattr(database, 'DB_PATH', path)
    database.init_db()
    return path


@pytest.fixture
def conn(db_path):
    conn = database.get_db()
    yield conn
    conn.close()


@pytest.fixture
def client(db_path):
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def owner():
    return default_profile()


@pytest.fixture
def employee():
    return dict(default_profile(), role='employee', commission_rate=50,
                keeps_cash=True, keeps_check=False)
