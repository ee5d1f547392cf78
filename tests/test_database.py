from sqlalchemy.exc import IntegrityError

from app.core.database import is_unique_violation


class PostgresError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


def integrity_error(orig):
    return IntegrityError("INSERT INTO persons", {}, orig)


def test_sqlite_unique_failure():
    assert is_unique_violation(integrity_error(Exception("UNIQUE constraint failed: persons.university_id")))


def test_sqlite_foreign_key_failure():
    assert not is_unique_violation(integrity_error(Exception("FOREIGN KEY constraint failed")))


def test_sqlite_not_null_failure():
    assert not is_unique_violation(integrity_error(Exception("NOT NULL constraint failed: persons.full_name_en")))


def test_postgres_unique_failure():
    error = PostgresError('duplicate key value violates constraint "persons_university_id_key"', "23505")

    assert is_unique_violation(integrity_error(error))


def test_postgres_foreign_key_failure():
    error = PostgresError('insert or update on table "persons" violates foreign key constraint', "23503")

    assert not is_unique_violation(integrity_error(error))
