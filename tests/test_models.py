import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import Session

from personapi.models import Base, Person


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


def test_table_name_and_columns():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    columns = {c["name"] for c in inspect(engine).get_columns("people")}
    assert columns == {
        "id",
        "name",
        "surname",
        "patronymic",
        "age",
        "gender",
        "nationality",
    }


def test_to_dict_omits_empty_optional_fields():
    person = Person(id=1, name="Дмитрий", surname="Ушаков")
    assert person.to_dict() == {"id": 1, "name": "Дмитрий", "surname": "Ушаков"}


def test_to_dict_includes_filled_fields():
    person = Person(
        id=2,
        name="Дмитрий",
        surname="Ушаков",
        patronymic="Васильевич",
        age=30,
        gender="male",
        nationality="RU",
    )
    assert person.to_dict() == {
        "id": 2,
        "name": "Дмитрий",
        "surname": "Ушаков",
        "patronymic": "Васильевич",
        "age": 30,
        "gender": "male",
        "nationality": "RU",
    }


def test_to_dict_keeps_zero_age():
    person = Person(id=3, name="A", surname="B", age=0)
    assert person.to_dict()["age"] == 0


def test_round_trip_through_database(session):
    person = Person(name="Дмитрий", surname="Ушаков", patronymic="Васильевич")
    session.add(person)
    session.commit()
    loaded = session.get(Person, person.id)
    assert loaded.to_dict() == {
        "id": person.id,
        "name": "Дмитрий",
        "surname": "Ушаков",
        "patronymic": "Васильевич",
    }


def test_ids_are_assigned_and_distinct(session):
    first = Person(name="A", surname="B")
    second = Person(name="C", surname="D")
    session.add_all([first, second])
    session.commit()
    assert first.id >= 1
    assert second.id > first.id


def test_name_is_required(session):
    from sqlalchemy.exc import IntegrityError

    session.add(Person(surname="Ушаков"))
    with pytest.raises(IntegrityError):
        session.commit()