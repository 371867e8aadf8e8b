"""Unit tests for the club search engine.

Tests call ClubSearchEngine directly with the db_session fixture.
"""

from datetime import timedelta

import pytest
from libs.common.errors import ValidationError
from services.clubs_service.models import ClubSortField, SkillLevel, SortOrder
from services.clubs_service.services.search import ClubSearchEngine, ClubSearchQuery
from tests.factories import ClubFactory, ReviewFactory, UserFactory, _now

CENTER_LAT, CENTER_LNG = -33.8688, 151.2093
KM_PER_DEGREE = 111.195  # haversine km per degree of latitude

engine = ClubSearchEngine()


def _north_of_center(km: float, **overrides):
    """A club ``km`` due north of the search center."""
    return ClubFactory.create(
        latitude=CENTER_LAT + km / KM_PER_DEGREE,
        longitude=CENTER_LNG,
        **overrides,
    )


async def _add(db, *rows):
    for row in rows:
        db.add(row)
    await db.commit()


# ---------------------------------------------------------------------------
# Distance search
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_distance_sort_returns_clubs_within_radius_nearest_first(db_session):
    await _add(
        db_session,
        _north_of_center(2, name="Two"),
        _north_of_center(8, name="Eight"),
        _north_of_center(15, name="Fifteen"),
    )

    items, pagination = await engine.search(
        db_session,
        ClubSearchQuery(
            lat=CENTER_LAT, lng=CENTER_LNG, radius=10, sort_by=ClubSortField.DISTANCE
        ),
    )

    assert [c.name for c in items] == ["Two", "Eight"]
    assert [c.distance for c in items] == [2.0, 8.0]
    assert pagination.total == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_distance_sort_descending(db_session):
    await _add(
        db_session,
        _north_of_center(1, name="One"),
        _north_of_center(3, name="Three"),
        _north_of_center(5, name="Five"),
    )

    items, _ = await engine.search(
        db_session,
        ClubSearchQuery(
            lat=CENTER_LAT,
            lng=CENTER_LNG,
            radius=10,
            sort_by=ClubSortField.DISTANCE,
            sort_order=SortOrder.DESC,
        ),
    )

    assert [c.name for c in items] == ["Five", "Three", "One"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_distance_sort_paginates_after_sorting(db_session):
    await _add(db_session, *[_north_of_center(km, name=f"Club {km}") for km in (5, 1, 4, 2, 3)])

    items, pagination = await engine.search(
        db_session,
        ClubSearchQuery(
            lat=CENTER_LAT,
            lng=CENTER_LNG,
            radius=10,
            page=2,
            limit=2,
            sort_by=ClubSortField.DISTANCE,
        ),
    )

    assert [c.name for c in items] == ["Club 3", "Club 4"]
    assert pagination.total == 5
    assert pagination.total_pages == 3
    distances = [c.distance for c in items]
    assert distances == sorted(distances)
    assert all(d <= 10 for d in distances)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_rounded_distance_never_exceeds_radius(db_session):
    # 9.97 km rounds to 10.0, past a 9.98 km radius.
    await _add(db_session, _north_of_center(9.97, name="Edge"))

    items, _ = await engine.search(
        db_session,
        ClubSearchQuery(
            lat=CENTER_LAT, lng=CENTER_LNG, radius=9.98, sort_by=ClubSortField.DISTANCE
        ),
    )

    assert [c.name for c in items] == ["Edge"]
    assert items[0].distance == 9.98


@pytest.mark.asyncio
@pytest.mark.unit
async def test_distance_total_counts_bounding_box_candidates(db_session):
    """A club in the corner of the box is counted but not returned."""
    corner = ClubFactory.create(
        name="Corner",
        # ~8.5 km north and ~8.5 km east: inside the 10 km box, ~12 km away.
        latitude=CENTER_LAT + 8.5 / KM_PER_DEGREE,
        longitude=CENTER_LNG + 8.5 / 92.3,
    )
    await _add(db_session, corner, _north_of_center(3, name="Near"))

    items, pagination = await engine.search(
        db_session,
        ClubSearchQuery(
            lat=CENTER_LAT, lng=CENTER_LNG, radius=10, sort_by=ClubSortField.DISTANCE
        ),
    )

    assert [c.name for c in items] == ["Near"]
    assert pagination.total == 2


# ---------------------------------------------------------------------------
# Store-ordered search
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_name_sort_with_center_reports_distance(db_session):
    await _add(
        db_session,
        _north_of_center(4, name="Bravo"),
        _north_of_center(2, name="Alpha"),
    )

    items, _ = await engine.search(
        db_session, ClubSearchQuery(lat=CENTER_LAT, lng=CENTER_LNG, radius=10)
    )

    assert [c.name for c in items] == ["Alpha", "Bravo"]
    assert [c.distance for c in items] == [2.0, 4.0]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_no_center_means_no_distance(db_session):
    await _add(db_session, ClubFactory.create(name="Anywhere"))

    items, _ = await engine.search(db_session, ClubSearchQuery())

    assert items[0].distance is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_created_at_sort_descending(db_session):
    now = _now()
    await _add(
        db_session,
        ClubFactory.create(name="Old", created_at=now - timedelta(days=30)),
        ClubFactory.create(name="New", created_at=now),
        ClubFactory.create(name="Mid", created_at=now - timedelta(days=3)),
    )

    items, _ = await engine.search(
        db_session,
        ClubSearchQuery(sort_by=ClubSortField.CREATED_AT, sort_order=SortOrder.DESC),
    )

    assert [c.name for c in items] == ["New", "Mid", "Old"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_store_pagination(db_session):
    await _add(db_session, *[ClubFactory.create(name=f"Club {i:02d}") for i in range(25)])

    items, pagination = await engine.search(db_session, ClubSearchQuery(page=2, limit=10))

    assert [c.name for c in items][0] == "Club 10"
    assert len(items) == 10
    assert pagination.model_dump() == {
        "page": 2,
        "limit": 10,
        "total": 25,
        "total_pages": 3,
    }


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_inactive_clubs_are_hidden(db_session):
    await _add(
        db_session,
        ClubFactory.create(name="Open"),
        ClubFactory.create(name="Closed", is_active=False),
    )

    items, pagination = await engine.search(db_session, ClubSearchQuery())

    assert [c.name for c in items] == ["Open"]
    assert pagination.total == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_text_search_is_case_insensitive_across_fields(db_session):
    await _add(
        db_session,
        ClubFactory.create(name="Bondi Sharks", description=None),
        ClubFactory.create(name="Other", description="Home of the SHARKS"),
        ClubFactory.create(name="Unrelated", description="Nothing here"),
    )

    items, _ = await engine.search(db_session, ClubSearchQuery(search="sharks"))

    assert {c.name for c in items} == {"Bondi Sharks", "Other"}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_text_search_treats_wildcards_literally(db_session):
    await _add(
        db_session,
        ClubFactory.create(name="100% Hockey"),
        ClubFactory.create(name="1000 Hockey"),
    )

    items, _ = await engine.search(db_session, ClubSearchQuery(search="100%"))

    assert [c.name for c in items] == ["100% Hockey"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_country_is_exact_and_city_is_substring(db_session):
    await _add(
        db_session,
        ClubFactory.create(name="A", country="Australia", city="North Sydney"),
        ClubFactory.create(name="B", country="Austria", city="Vienna"),
    )

    by_country, _ = await engine.search(db_session, ClubSearchQuery(country="australia"))
    partial_country, _ = await engine.search(db_session, ClubSearchQuery(country="Austr"))
    by_city, _ = await engine.search(db_session, ClubSearchQuery(city="sydney"))

    assert [c.name for c in by_country] == ["A"]
    assert partial_country == []
    assert [c.name for c in by_city] == ["A"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_boolean_filters(db_session):
    await _add(
        db_session,
        ClubFactory.create(name="Beginner", welcomes_beginners=True, is_verified=False),
        ClubFactory.create(name="Verified", welcomes_beginners=False, is_verified=True),
    )

    beginners, _ = await engine.search(
        db_session, ClubSearchQuery(welcomes_beginners=True)
    )
    verified, _ = await engine.search(db_session, ClubSearchQuery(is_verified=True))

    assert [c.name for c in beginners] == ["Beginner"]
    assert [c.name for c in verified] == ["Verified"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_blank_filters_are_ignored(db_session):
    await _add(db_session, ClubFactory.create(name="Any"))

    items, _ = await engine.search(
        db_session, ClubSearchQuery(search="  ", country="", city="")
    )

    assert len(items) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_skill_level_does_not_narrow_results(db_session):
    await _add(db_session, ClubFactory.create(name="Any"))

    items, _ = await engine.search(
        db_session, ClubSearchQuery(skill_level=SkillLevel.ELITE)
    )

    assert len(items) == 1


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_average_rating_rounded_to_one_decimal(db_session):
    rated = ClubFactory.create(name="Rated")
    unrated = ClubFactory.create(name="Unrated")
    users = [UserFactory.create() for _ in range(3)]
    await _add(db_session, rated, unrated, *users)
    await _add(
        db_session,
        *[
            ReviewFactory.create(club_id=rated.id, user_id=user.id, rating=rating)
            for user, rating in zip(users, (4, 4, 5))
        ],
    )

    items, _ = await engine.search(db_session, ClubSearchQuery())
    ratings = {c.name: c.average_rating for c in items}

    assert ratings == {"Rated": 4.3, "Unrated": None}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "query,field",
    [
        (ClubSearchQuery(sort_by=ClubSortField.DISTANCE), "sortBy"),
        (ClubSearchQuery(lat=10.0), "lng"),
        (ClubSearchQuery(lng=10.0), "lat"),
        (ClubSearchQuery(lat=91.0, lng=0.0), "lat"),
        (ClubSearchQuery(lat=0.0, lng=-181.0), "lng"),
        (ClubSearchQuery(radius=0), "radius"),
        (ClubSearchQuery(limit=101), "limit"),
        (ClubSearchQuery(page=0), "page"),
    ],
)
async def test_invalid_queries_fail_before_touching_the_store(query, field):
    # No session at all: validation must not reach the database.
    with pytest.raises(ValidationError) as exc_info:
        await engine.search(None, query)

    assert field in exc_info.value.errors


# ---------------------------------------------------------------------------
# Nearby
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_nearby_returns_closest_first_up_to_limit(db_session):
    await _add(
        db_session,
        _north_of_center(6, name="Six"),
        _north_of_center(1, name="One"),
        _north_of_center(3, name="Three"),
        _north_of_center(60, name="Far"),
    )

    items = await engine.nearby(
        db_session, lat=CENTER_LAT, lng=CENTER_LNG, radius=50, limit=2
    )

    assert [c.name for c in items] == ["One", "Three"]
