from datetime import date, timedelta
import uuid

import pytest

from sqlalchemy.pool import StaticPool
from flask_jwt_extended import create_access_token

from marketplace import create_app
from marketplace.config import TestConfig as BaseTestConfig
from marketplace.extensions import db

# Import models so SQLAlchemy registers mappers/tables
import marketplace.models  # noqa: F401
from marketplace.models.service_provider import ServiceProvider
from marketplace.models.equipment import Equipment
from marketplace.models.equipment_rental import EquipmentRental
from marketplace.models.conversation import Conversation
from marketplace.models.user_role import UserRole


class PytestConfig(BaseTestConfig):
	SQLALCHEMY_DATABASE_URI = "sqlite://"
	SQLALCHEMY_ENGINE_OPTIONS = {
		"connect_args": {"check_same_thread": False},
		"poolclass": StaticPool,
	}
	JWT_SECRET_KEY = "test-secret-with-enough-length-for-hs256"
	CHAT_MESSAGE_MAX_LENGTH = 50
	RENTAL_PENDING_RELEASES_EQUIPMENT = True


@pytest.fixture(scope="session")
def app():
	app = create_app(PytestConfig)
	with app.app_context():
		db.create_all()
		yield app
		db.session.remove()
		db.drop_all()


@pytest.fixture(autouse=True)
def _clean_tables(app):
	yield
	db.session.rollback()
	for table in reversed(db.metadata.sorted_tables):
		db.session.execute(table.delete())
	db.session.commit()


@pytest.fixture()
def client(app):
	return app.test_client()


@pytest.fixture()
def db_session(app):
	with app.app_context():
		yield db.session
		db.session.rollback()


@pytest.fixture()
def new_user_id():
	def _new_user_id() -> str:
		return str(uuid.uuid4())

	return _new_user_id


@pytest.fixture()
def make_token(app):
	def _make_token(user_id: str) -> str:
		with app.app_context():
			return create_access_token(identity=str(user_id))

	return _make_token


@pytest.fixture()
def auth_header(make_token):
	def _auth_header(user_id: str) -> dict:
		token = make_token(user_id)
		return {"Authorization": f"Bearer {token}"}

	return _auth_header


@pytest.fixture()
def make_role(db_session):
	def _make_role(user_id: str, role: str = "admin"):
		r = UserRole(user_id=str(user_id), role=role)
		db_session.add(r)
		db_session.commit()
		return r

	return _make_role


@pytest.fixture()
def make_provider(db_session):
	def _make_provider(user_id: str, business_name: str = "Acme Rentals"):
		p = ServiceProvider(
			user_id=str(user_id),
			business_name=business_name,
			description="Tools and equipment for rent",
			address="123 Main Street",
			zip_code="1000",
		)
		db_session.add(p)
		db_session.commit()
		return p

	return _make_provider


@pytest.fixture()
def make_equipment(db_session):
	def _make_equipment(provider_id: str, name: str = "Concrete mixer", is_available: bool = True):
		e = Equipment(
			provider_id=provider_id,
			name=name,
			description="Heavy duty",
			price_per_day=250,
			is_available=is_available,
		)
		db_session.add(e)
		db_session.commit()
		return e

	return _make_equipment


@pytest.fixture()
def make_rental(db_session):
	def _make_rental(equipment, customer_id: str | None = None, status: str = "pending"):
		start = date.today() + timedelta(days=1)
		r = EquipmentRental(
			equipment_id=equipment.id,
			provider_id=equipment.provider_id,
			customer_id=customer_id or str(uuid.uuid4()),
			rental_start_date=start,
			rental_end_date=start + timedelta(days=2),
			total_price=500,
			status=status,
		)
		db_session.add(r)
		db_session.commit()
		return r

	return _make_rental


@pytest.fixture()
def make_conversation(db_session):
	def _make_conversation(customer_id: str, provider_id: str, last_message: str | None = None, last_message_at=None):
		c = Conversation(
			customer_id=str(customer_id),
			provider_id=str(provider_id),
			customer_name="Customer",
			provider_name="Provider",
			last_message=last_message,
		)
		if last_message_at is not None:
			c.last_message_at = last_message_at
		db_session.add(c)
		db_session.commit()
		return c

	return _make_conversation
