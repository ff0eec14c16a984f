"""
Integration tests running the accessors against a real PostgreSQL database.
Skipped when TEST_DATABASE_URL is unreachable.
"""

import pytest
from datetime import timedelta
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from lightbnb.models import User, Property, Reservation, PropertyReview
from lightbnb.repositories.user import UserRepository
from lightbnb.repositories.reservation import ReservationRepository
from lightbnb.repositories.property import PropertyRepository
from lightbnb.utils.exceptions import ConstraintViolationError
from tests.conftest import UserFactory, PropertyFactory

pytestmark = pytest.mark.integration


def make_property(owner_id: int, **overrides) -> Property:
    data = PropertyFactory.create_property_data(owner_id=owner_id)
    data.update(overrides)
    return Property(**data)


@pytest.fixture
async def seeded(pg_session: AsyncSession) -> Dict[str, Any]:
    """
    Two properties and one guest:
    San Francisco at 100.00/night rated 4,4,4,4,5 (avg 4.2),
    Denver at 49.00/night rated 3,4 (avg 3.5).
    The guest also has a stay ending today and one in the future.
    """
    today = (await pg_session.execute(text("SELECT now()::DATE"))).scalar()

    owner = User(name="Owner", email="owner@example.com", password="pw")
    guest = User(name="Guest", email="guest@example.com", password="pw")
    pg_session.add_all([owner, guest])
    await pg_session.flush()

    san_francisco = make_property(owner.id, title="Golden Gate loft", city="San Francisco", cost_per_night=10000)
    denver = make_property(owner.id, title="Mile high cabin", city="Denver", cost_per_night=4900)
    pg_session.add_all([san_francisco, denver])
    await pg_session.flush()

    offset = 100
    for prop, ratings in ((san_francisco, [4, 4, 4, 4, 5]), (denver, [3, 4])):
        for rating in ratings:
            start = today - timedelta(days=offset)
            reservation = Reservation(
                property_id=prop.id,
                guest_id=guest.id,
                start_date=start,
                end_date=start + timedelta(days=3),
            )
            pg_session.add(reservation)
            await pg_session.flush()
            pg_session.add(PropertyReview(
                guest_id=guest.id,
                property_id=prop.id,
                reservation_id=reservation.id,
                rating=rating,
                message="Stayed here",
            ))
            offset -= 10

    pg_session.add_all([
        Reservation(property_id=denver.id, guest_id=guest.id,
                    start_date=today - timedelta(days=2), end_date=today),
        Reservation(property_id=san_francisco.id, guest_id=guest.id,
                    start_date=today + timedelta(days=5), end_date=today + timedelta(days=9)),
    ])
    await pg_session.commit()

    return {
        "today": today,
        "owner": owner,
        "guest": guest,
        "san_francisco": san_francisco,
        "denver": denver,
    }


class TestUserQueries:
    """Test user accessors end to end."""

    @pytest.mark.asyncio
    async def test_add_then_get_by_email(self, pg_session: AsyncSession):
        repository = UserRepository(pg_session)
        user_data = UserFactory.create_user_data(email="devin@example.com", name="Devin Sanders")

        rows = await repository.add_user(user_data)
        user = await repository.get_user_with_email("devin@example.com")

        assert len(rows) == 1
        assert user["name"] == "Devin Sanders"
        assert user["email"] == "devin@example.com"
        assert user["password"] == user_data["password"]
        assert user["id"] == rows[0]["id"]

    @pytest.mark.asyncio
    async def test_unknown_email(self, pg_session: AsyncSession):
        repository = UserRepository(pg_session)

        assert await repository.get_user_with_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_get_by_id(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = UserRepository(pg_session)

        user = await repository.get_user_with_id(seeded["guest"].id)

        assert user["email"] == "guest@example.com"
        assert await repository.get_user_with_id(999999) is None

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = UserRepository(pg_session)

        result = await repository.try_add_user(UserFactory.create_user_data(email="guest@example.com"))

        assert isinstance(result.error, ConstraintViolationError)
        assert await repository.add_user(UserFactory.create_user_data(email="guest@example.com")) is None


class TestReservationQueries:
    """Test past reservations end to end."""

    @pytest.mark.asyncio
    async def test_only_past_reservations_sorted(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = ReservationRepository(pg_session)

        reservations = await repository.get_all_reservations(seeded["guest"].id, limit=20)

        assert len(reservations) == 7
        assert all(row["end_date"] < seeded["today"] for row in reservations)
        start_dates = [row["start_date"] for row in reservations]
        assert start_dates == sorted(start_dates)

    @pytest.mark.asyncio
    async def test_rows_carry_property_and_rating(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = ReservationRepository(pg_session)

        reservations = await repository.get_all_reservations(seeded["guest"].id, limit=20)

        first = reservations[0]
        assert first["title"] == "Golden Gate loft"
        assert float(first["average_rating"]) == pytest.approx(4.2)

    @pytest.mark.asyncio
    async def test_limit(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = ReservationRepository(pg_session)

        assert len(await repository.get_all_reservations(seeded["guest"].id, limit=3)) == 3
        assert len(await repository.get_all_reservations(seeded["guest"].id)) == 7

    @pytest.mark.asyncio
    async def test_owner_has_no_stays(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = ReservationRepository(pg_session)

        assert await repository.get_all_reservations(seeded["owner"].id) == []


class TestPropertyQueries:
    """Test property search and creation end to end."""

    @pytest.mark.asyncio
    async def test_no_options_sorted_by_cost(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = PropertyRepository(pg_session)

        properties = await repository.get_all_properties()

        assert [row["city"] for row in properties] == ["Denver", "San Francisco"]
        assert len(await repository.get_all_properties(limit=1)) == 1

    @pytest.mark.asyncio
    async def test_city_substring(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = PropertyRepository(pg_session)

        properties = await repository.get_all_properties({"city": "san"})

        assert [row["city"] for row in properties] == ["San Francisco"]

    @pytest.mark.asyncio
    async def test_minimum_rating(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = PropertyRepository(pg_session)

        properties = await repository.get_all_properties({"minimum_rating": 4})

        assert [row["city"] for row in properties] == ["San Francisco"]
        assert float(properties[0]["average_rating"]) == pytest.approx(4.2)

    @pytest.mark.asyncio
    async def test_price_range(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = PropertyRepository(pg_session)

        properties = await repository.get_all_properties({
            "minimum_price_per_night": 50,
            "maximum_price_per_night": 150,
        })

        assert [row["cost_per_night"] for row in properties] == [10000]

    @pytest.mark.asyncio
    async def test_owner_without_city(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = PropertyRepository(pg_session)

        properties = await repository.get_all_properties({"owner_id": seeded["owner"].id})

        assert len(properties) == 2
        assert await repository.get_all_properties({"owner_id": seeded["guest"].id}) == []

    @pytest.mark.asyncio
    async def test_add_property_stores_numbers(self, pg_session: AsyncSession, seeded: Dict[str, Any]):
        repository = PropertyRepository(pg_session)
        property_data = PropertyFactory.create_property_data(
            owner_id=str(seeded["owner"].id),
            parking_spaces="2",
            number_of_bathrooms="1",
            number_of_bedrooms="4",
        )

        rows = await repository.add_property(property_data)

        created = rows[0]
        assert created["owner_id"] == seeded["owner"].id
        assert created["parking_spaces"] == 2
        assert created["number_of_bathrooms"] == 1
        assert created["number_of_bedrooms"] == 4
        assert created["active"] is True
