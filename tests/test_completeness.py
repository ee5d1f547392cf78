from datetime import date, datetime, timezone

from app.models import Card, Person, PersonType
from app.services.completeness import (
    validate_card,
    validate_card_by_id,
    validate_person,
    validate_person_by_id,
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def make_person(**overrides):
    fields = {
        "type": PersonType.STUDENT,
        "university_id": "ENG-2024-00001",
        "full_name_en": "Layla Hassan",
        "full_name_ar": "ليلى حسن",
        "department_id": 3,
        "photo_url": "https://photos.example.edu/ENG-2024-00001.jpg",
    }
    fields.update(overrides)
    return Person(**fields)


def make_card(**overrides):
    fields = {
        "name": "Layla Hassan",
        "id_number": "ENG-2024-00001",
        "type": PersonType.STUDENT,
        "department": "Mechanical Engineering",
        "photo_url": "https://photos.example.edu/ENG-2024-00001.jpg",
        "expiry_date": None,
    }
    fields.update(overrides)
    return Card(**fields)


class TestValidatePerson:
    def test_complete_person(self):
        report = validate_person(make_person())

        assert report.is_complete is True
        assert report.has_photo and report.has_name and report.has_valid_id
        assert report.has_department is True
        assert report.has_valid_expiry is True
        assert report.errors == []
        assert report.warnings == []

    def test_missing_photo_is_an_error(self):
        report = validate_person(make_person(photo_url=None, department_id=None, full_name_ar=None))

        assert report.is_complete is False
        assert report.has_photo is False
        assert report.errors == ["Photo is missing"]
        assert report.warnings == ["Department not assigned", "Arabic name is missing"]

    def test_warnings_do_not_affect_completeness(self):
        report = validate_person(make_person(department_id=None, full_name_ar=""))

        assert report.is_complete is True
        assert report.has_department is False
        assert report.warnings == ["Department not assigned", "Arabic name is missing"]

    def test_blank_name_and_id_are_errors(self):
        report = validate_person(make_person(full_name_en="   ", university_id=" "))

        assert report.has_name is False
        assert report.has_valid_id is False
        assert report.errors == ["Name is required", "University ID is required"]

    def test_errors_keep_their_order(self):
        report = validate_person(make_person(photo_url="", full_name_en="", university_id=""))

        assert report.errors == ["Photo is missing", "Name is required", "University ID is required"]

    def test_missing_person(self):
        report = validate_person(None)

        assert report.model_dump() == {
            "has_photo": False,
            "has_name": False,
            "has_valid_id": False,
            "has_valid_expiry": False,
            "has_department": False,
            "is_complete": False,
            "errors": ["Person not found"],
            "warnings": [],
        }


class TestValidateCard:
    def test_complete_card_without_expiry(self):
        report = validate_card(make_card(), now=NOW)

        assert report.is_complete is True
        assert report.has_valid_expiry is True
        assert report.errors == []
        assert report.warnings == []

    def test_future_expiry_is_valid(self):
        report = validate_card(make_card(expiry_date=date(2024, 6, 16)), now=NOW)

        assert report.has_valid_expiry is True
        assert report.is_complete is True

    def test_expired_yesterday(self):
        report = validate_card(make_card(expiry_date=date(2024, 6, 14)), now=NOW)

        assert report.has_valid_expiry is False
        assert report.is_complete is False
        assert report.errors == ["Card has expired"]

    def test_expiring_today_counts_as_expired(self):
        report = validate_card(make_card(expiry_date=date(2024, 6, 15)), now=NOW)

        assert report.has_valid_expiry is False
        assert "Card has expired" in report.errors

    def test_expiry_error_comes_after_missing_fields(self):
        report = validate_card(
            make_card(photo_url=None, name=" ", department="", expiry_date=date(2024, 1, 1)),
            now=NOW
        )

        assert report.errors == ["Photo is missing", "Name is required", "Card has expired"]
        assert report.warnings == ["Department not specified"]
        assert report.has_department is False

    def test_blank_id_number(self):
        report = validate_card(make_card(id_number="  "), now=NOW)

        assert report.has_valid_id is False
        assert report.errors == ["ID Number is required"]

    def test_missing_card(self):
        report = validate_card(None)

        assert report.is_complete is False
        assert report.errors == ["Card not found"]
        assert report.warnings == []
        assert not any([
            report.has_photo,
            report.has_name,
            report.has_valid_id,
            report.has_valid_expiry,
            report.has_department,
        ])


class TestLookupById:
    def test_person_lookup(self, db_session):
        person = make_person(department_id=None)
        db_session.add(person)
        db_session.commit()

        assert validate_person_by_id(db_session, person.id).is_complete is True
        assert validate_person_by_id(db_session, person.id + 100).errors == ["Person not found"]

    def test_card_lookup(self, db_session):
        card = make_card()
        db_session.add(card)
        db_session.commit()

        assert validate_card_by_id(db_session, card.id).is_complete is True
        assert validate_card_by_id(db_session, 9999).errors == ["Card not found"]
