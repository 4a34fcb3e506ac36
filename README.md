# personapi

A small REST service that stores people. Each person has a name, a surname, a
patronymic, an age, a gender and a nationality. When a person is created, the
service guesses their gender and nationality from the first name. It asks the
public Genderize and Nationalize services for these guesses.

- A gender is kept only when its probability is above 0.7.
- A nationality is the most likely country, kept only when its probability is above 0.3.
- If a lookup fails, or its answer is not confident enough, the field is left empty.

## Installation

```
pip install .
```

The server stores its data in PostgreSQL. You also need a PostgreSQL driver
that SQLAlchemy uses by default, such as `psycopg2`.

## Configuration

The `personapi` command reads its settings from a `.env` file in the working
directory. The file must exist; if it is missing, the command exits with
status 1. Variables that are already set in the environment take precedence
over the file.

```
DB_HOST=localhost
DB_PORT=5432
DB_USER=user
DB_PASSWORD=password
DB_NAME=people
PORT=8080
```

- The `DB_*` variables build the database URL, with `sslmode=disable`.
- `PORT` defaults to `8080` when it is not set.

## Running

```
personapi
```

On startup the command does the following:

1. It connects to the database and checks the connection.
2. It creates the `people` table if it does not exist yet.
3. It serves HTTP on `0.0.0.0` at the configured port, using Flask's built-in server.

Log lines are written to standard output as JSON objects with `level`, `msg`
and `time`. If any startup step fails, the command logs the error and exits
with status 1.

## Endpoints

| Method | Path           | Purpose                                     |
|--------|----------------|---------------------------------------------|
| POST   | `/people`      | Create a person from `name`, `surname` and an optional `patronymic` |
| GET    | `/people`      | List people, with filters and pagination    |
| GET    | `/people/<id>` | Fetch one person                            |
| PUT    | `/people/<id>` | Change only the fields given in the body    |
| DELETE | `/people/<id>` | Delete a person                             |

### Creating

`POST /people` needs `name` and `surname` to be non-empty strings.

### Listing

`GET /people` returns people ordered by id and accepts these query parameters:

- `name`, `surname`: case-insensitive substring match
- `age`, `gender`, `nationality`: exact match
- `skip`: offset, default `0`
- `limit`: page size, default `10`; a negative value means no limit

A numeric parameter or id that is not an integer is treated as `0`.

### Updating

`PUT /people/<id>` accepts any of these fields:

- `name`, `surname`, `patronymic`, `gender`, `nationality`: strings
- `age`: an integer

Fields that are absent or `null` are left unchanged.

### Responses and errors

A person is returned as a JSON object. Empty optional fields are omitted from it.

Errors are returned as `{"error": "..."}` with one of these statuses:

- 400: the request body is invalid
- 404: the person is unknown
- 500: the database failed

A delete returns `{"message": "Удалён"}`, whether or not the id existed.

### Example

```
curl -X POST localhost:8080/people \
     -H 'Content-Type: application/json' \
     -d '{"name": "Dmitriy", "surname": "Ushakov"}'
```

## Using it as a library

- `personapi.app.create_app(engine)` builds the Flask application around an SQLAlchemy engine.
- `personapi.database.run_migrations(engine)` creates the schema.
- `personapi.database.init_db(url)` opens an engine and checks the connection. Without a URL, it builds one from the `DB_*` variables via `database_url()`.

With an in-memory SQLite engine, this is enough for testing:

```python
from sqlalchemy import create_engine
from personapi.app import create_app
from personapi.database import run_migrations

engine = create_engine("sqlite://")
run_migrations(engine)
app = create_app(engine)
client = app.test_client()
```

Other parts of the package can be used on their own:

- `personapi.handlers.PersonCreate` and `PersonUpdate` validate request bodies and raise `ValidationError`.
- `fetch_gender(name)` and `fetch_nationality(name)` perform the lookups.
- `create_blueprint(session_factory)` returns the routes as a Flask blueprint.

## What it does not do

- The schema is set up by creating missing tables only. There are no versioned migrations, and existing tables are never altered.
- No API documentation (such as an OpenAPI page) is served.
- The server is Flask's built-in one. For production, run `create_app` under a WSGI server of your choice.

## Tests

```
pip install .[test]
pytest
```