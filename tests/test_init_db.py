from app.core.config import settings
from app.core.auth import AuthUtils
from app.core.init_db import SEED_CARDS, seed_initial_data
from app.models import User, College, Department, Level, Card


def test_seed_initial_data(db_session):
    seed_initial_data(db_session)

    admin = db_session.query(User).one()
    assert admin.username == settings.default_admin_username
    assert admin.superuser is True
    assert AuthUtils.verify_password(settings.default_admin_password, admin.hashed_password)

    assert sorted(c.code for c in db_session.query(College)) == ["BUS", "CS", "ENG"]
    assert sorted(d.code for d in db_session.query(Department)) == ["EE", "IS", "ME", "SE"]
    assert [level.order for level in db_session.query(Level).order_by(Level.order)] == [1, 2, 3, 4]
    assert db_session.query(Card).count() == len(SEED_CARDS)


def test_seeding_is_idempotent(db_session):
    seed_initial_data(db_session)
    seed_initial_data(db_session)

    assert db_session.query(User).count() == 1
    assert db_session.query(College).count() == 3
    assert db_session.query(Level).count() == 4
    assert db_session.query(Card).count() == len(SEED_CARDS)


def test_existing_operators_are_kept(db_session, operator):
    seed_initial_data(db_session)

    assert [u.username for u in db_session.query(User)] == ["registrar"]


def test_seeded_departments_belong_to_their_college(db_session):
    seed_initial_data(db_session)

    engineering = db_session.query(College).filter(College.code == "ENG").one()
    assert sorted(d.code for d in engineering.departments) == ["EE", "ME"]
