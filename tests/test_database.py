import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from personapi.database import database_url, init_db, run_migrations
from personapi.models import Person

ENV = {
    "DB_HOST": "localhost",
    "DB_USER": "user",
    "DB_PASSWORD": "password",
    "DB_NAME": "people_db",
    "DB_PORT": "5432",
}


def test_database_url_components():
    url = database_url(ENV)
    assert url.host == ENV["DB_HOST"]
    assert url.username == ENV["DB_USER"]
    assert url.password == ENV["DB_PASSWORD"]
    assert url.database == ENV["DB_NAME"]
    assert url.port == 5432
    assert url.query["sslmode"] == "disable"
    assert url.get_backend_name() == "postgresql"


def test_database_url_reads_process_environment(monkeypatch):
    for key, value in ENV.items():
        monkeypatch.setenv(key, value)
    assert database_url() == database_url(ENV)


def test_database_url_missing_values_are_unset():
    url = database_url({})
    assert url.host is None
    assert url.port is None
    assert url.database is None


def test_database_url_rejects_bad_port():
    with pytest.raises(ValueError):
        database_url({**ENV, "DB_PORT": "abc"})


def test_init_db_connects_to_sqlite():
    engine = init_db("sqlite://")
    assert engine.dialect.name == "sqlite"
    engine.dispose()


def test_init_db_raises_on_unreachable_database(tmp_path):
    url = f"sqlite:///{tmp_path / 'missing' / 'db.sqlite'}"
    with pytest.raises(OperationalError):
        init_db(url)


def test_run_migrations_creates_people_table():
    engine = init_db("sqlite://")
    run_migrations(engine)
    assert "people" in inspect(engine).get_table_names()
    engine.dispose()


def test_run_migrations_is_idempotent_and_keeps_data(tmp_path):
    engine = init_db(f"sqlite:///{tmp_path / 'db.sqlite'}")
    run_migrations(engine)
    with Session(engine) as session:
        session.add(Person(name="Дмитрий", surname="Ушаков"))
        session.commit()
    run_migrations(engine)
    with Session(engine) as session:
        names = [p.name for p in session.query(Person).all()]
    assert names == ["Дмитрий"]
    engine.dispose()