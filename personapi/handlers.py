"""HTTP handlers for the people resource."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, fields
from typing import Any, Callable, Optional

import requests
from flask import Blueprint, jsonify, request
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Person

logger = logging.getLogger(__name__)

GENDERIZE_URL = "https://api.genderize.io"
NATIONALIZE_URL = "https://api.nationalize.io"
GENDER_THRESHOLD = 0.7
NATIONALITY_THRESHOLD = 0.3
_LOOKUP_TIMEOUT = 10

_INTEGER = re.compile(r"[+-]?[0-9]+")


class ValidationError(ValueError):
    """Raised when a request body does not match the expected shape."""


def _optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"field {key!r} must be a string")
    return value


def _optional_int(data: dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"field {key!r} must be an integer")
    return value


def _require_object(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data


@dataclass
class PersonCreate:
    """Body of a request that creates a person."""

    name: str
    surname: str
    patronymic: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "PersonCreate":
        """Validate decoded JSON; name and surname must be non-empty."""
        body = _require_object(data)
        name = _optional_str(body, "name")
        surname = _optional_str(body, "surname")
        patronymic = _optional_str(body, "patronymic")
        if not name:
            raise ValidationError("field 'name' is required")
        if not surname:
            raise ValidationError("field 'surname' is required")
        return cls(name=name, surname=surname, patronymic=patronymic or "")


@dataclass
class PersonUpdate:
    """Body of a request that changes some fields of a person."""

    name: Optional[str] = None
    surname: Optional[str] = None
    patronymic: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None

    @classmethod
    def from_json(cls, data: Any) -> "PersonUpdate":
        """Validate decoded JSON; absent or null fields stay unchanged."""
        body = _require_object(data)
        return cls(
            name=_optional_str(body, "name"),
            surname=_optional_str(body, "surname"),
            patronymic=_optional_str(body, "patronymic"),
            age=_optional_int(body, "age"),
            gender=_optional_str(body, "gender"),
            nationality=_optional_str(body, "nationality"),
        )

    def apply(self, person: Person) -> None:
        """Copy every provided field onto ``person``."""
        for field in fields(self):
            value = getattr(self, field.name)
            if value is not None:
                setattr(person, field.name, value)


def _lookup(url: str, name: str) -> Any:
    try:
        response = requests.get(url, params={"name": name}, timeout=_LOOKUP_TIMEOUT)
        return response.json()
    except (requests.RequestException, ValueError):
        return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def fetch_gender(name: str) -> Optional[str]:
    """Ask the gender service; return the gender if it is confident enough."""
    data = _lookup(GENDERIZE_URL, name)
    if not isinstance(data, dict):
        return None
    gender = data.get("gender")
    probability = data.get("probability")
    if gender is not None and not isinstance(gender, str):
        return None
    if probability is not None and not _is_number(probability):
        return None
    if (probability or 0) > GENDER_THRESHOLD and gender:
        return gender
    return None


def fetch_nationality(name: str) -> Optional[str]:
    """Ask the nationality service; return the top country if likely enough."""
    data = _lookup(NATIONALIZE_URL, name)
    if not isinstance(data, dict):
        return None
    countries = data.get("country")
    if not isinstance(countries, list) or not countries:
        return None
    top = countries[0]
    if not isinstance(top, dict):
        return None
    country_id = top.get("country_id")
    probability = top.get("probability")
    if country_id is not None and not isinstance(country_id, str):
        return None
    if probability is not None and not _is_number(probability):
        return None
    if (probability or 0) > NATIONALITY_THRESHOLD and country_id:
        return country_id
    return None


def _atoi(text: str) -> int:
    """Parse a decimal integer; anything else counts as zero."""
    return int(text) if _INTEGER.fullmatch(text) else 0


def _load_body() -> Any:
    raw = request.get_data()
    if not raw.strip():
        raise ValidationError("EOF")
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ValidationError(f"invalid JSON: {exc}") from exc


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def create_blueprint(session_factory: Callable[[], Session]) -> Blueprint:
    """Build the blueprint serving the /people routes."""
    blueprint = Blueprint("people", __name__)

    @blueprint.post("/people")
    def create_person():
        try:
            payload = PersonCreate.from_json(_load_body())
        except ValidationError as exc:
            logger.error("Invalid input: %s", exc)
            return _error(str(exc), 400)
        person = Person(
            name=payload.name,
            surname=payload.surname,
            patronymic=payload.patronymic,
            gender=fetch_gender(payload.name) or "",
            nationality=fetch_nationality(payload.name) or "",
        )
        logger.info("Creating: %s %s", person.name, person.surname)
        try:
            with session_factory() as session:
                session.add(person)
                session.commit()
                body = person.to_dict()
        except SQLAlchemyError as exc:
            logger.error("Create failed: %s", exc)
            return _error("Не удалось создать", 500)
        logger.info("Created ID: %d", body["id"])
        return jsonify(body), 200

    @blueprint.get("/people")
    def get_people():
        args = request.args
        query = select(Person)
        if name := args.get("name", ""):
            query = query.where(Person.name.ilike(f"%{name}%"))
        if surname := args.get("surname", ""):
            query = query.where(Person.surname.ilike(f"%{surname}%"))
        if age := args.get("age", ""):
            query = query.where(Person.age == _atoi(age))
        if gender := args.get("gender", ""):
            query = query.where(Person.gender == gender)
        if nationality := args.get("nationality", ""):
            query = query.where(Person.nationality == nationality)
        skip = _atoi(args.get("skip", "0"))
        limit = _atoi(args.get("limit", "10"))
        query = query.order_by(Person.id)
        if skip > 0:
            query = query.offset(skip)
        if limit >= 0:
            query = query.limit(limit)
        try:
            with session_factory() as session:
                people = [person.to_dict() for person in session.scalars(query)]
        except SQLAlchemyError as exc:
            logger.error("Listing failed: %s", exc)
            return _error("Не удалось получить", 500)
        logger.info("Fetched %d records", len(people))
        return jsonify(people), 200

    @blueprint.get("/people/<person_id>")
    def get_person(person_id: str):
        ident = _atoi(person_id)
        try:
            with session_factory() as session:
                person = session.get(Person, ident)
                body = person.to_dict() if person is not None else None
        except SQLAlchemyError as exc:
            logger.error("Lookup of ID=%d failed: %s", ident, exc)
            body = None
        if body is None:
            logger.error("Not found ID=%d", ident)
            return _error("Не найден", 404)
        logger.info("Fetched ID: %d", ident)
        return jsonify(body), 200

    @blueprint.put("/people/<person_id>")
    def update_person(person_id: str):
        ident = _atoi(person_id)
        with session_factory() as session:
            try:
                person = session.get(Person, ident)
            except SQLAlchemyError as exc:
                logger.error("Lookup of ID=%d failed: %s", ident, exc)
                person = None
            if person is None:
                logger.error("Not found ID=%d", ident)
                return _error("Не найден", 404)
            try:
                changes = PersonUpdate.from_json(_load_body())
            except ValidationError as exc:
                logger.error("Invalid input: %s", exc)
                return _error(str(exc), 400)
            changes.apply(person)
            try:
                session.commit()
                body = person.to_dict()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Update of ID=%d failed: %s", ident, exc)
                return _error("Не удалось обновить", 500)
        logger.info("Updated ID: %d", ident)
        return jsonify(body), 200

    @blueprint.delete("/people/<person_id>")
    def delete_person(person_id: str):
        ident = _atoi(person_id)
        try:
            with session_factory() as session:
                session.execute(delete(Person).where(Person.id == ident))
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Delete of ID=%d failed: %s", ident, exc)
            return _error("Не найден", 404)
        logger.info("Deleted ID: %d", ident)
        return jsonify({"message": "Удалён"}), 200

    return blueprint