"""Integration tests for equipment_service endpoints."""

import uuid
from datetime import timedelta

import pytest
from services.equipment_service.models import (
    Equipment,
    EquipmentCheckout,
    EquipmentType,
)
from services.members_service.models import ClubRole
from sqlalchemy import func, select
from tests.conftest import auth_headers
from tests.factories import (
    CheckoutFactory,
    ClubFactory,
    ClubMemberFactory,
    EquipmentFactory,
    UserFactory,
    _now,
)


async def _make_user(db, **overrides):
    user = UserFactory.create(**overrides)
    db.add(user)
    await db.commit()
    return user


async def _make_club(db):
    club = ClubFactory.create()
    db.add(club)
    await db.commit()
    return club


async def _add_member(db, club, role=ClubRole.MEMBER, **user_overrides):
    user = await _make_user(db, **user_overrides)
    db.add(ClubMemberFactory.create(user_id=user.id, club_id=club.id, role=role))
    await db.commit()
    return user


async def _make_stick(db, club, **overrides):
    stick = EquipmentFactory.create(club_id=club.id, **overrides)
    db.add(stick)
    await db.commit()
    return stick


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_equipment_manager_adds_item(equipment_client, db_session):
    club = await _make_club(db_session)
    manager = await _add_member(db_session, club, role=ClubRole.EQUIPMENT_MANAGER)

    response = await equipment_client.post(
        f"/clubs/{club.id}/equipment",
        json={"type": "GLOVE", "name": "Left glove", "size": "M"},
        headers=auth_headers(manager),
    )

    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["type"] == "GLOVE"
    assert data["condition"] == "GOOD"
    assert data["is_available"] is True
    assert data["current_checkout"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_plain_member_cannot_add_item(equipment_client, db_session):
    club = await _make_club(db_session)
    member = await _add_member(db_session, club)

    response = await equipment_client.post(
        f"/clubs/{club.id}/equipment",
        json={"type": "STICK", "name": "Stick"},
        headers=auth_headers(member),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_filters_by_type_and_availability(equipment_client, db_session):
    club = await _make_club(db_session)
    member = await _add_member(db_session, club)
    free_stick = await _make_stick(db_session, club, name="Free stick")
    lent_stick = await _make_stick(db_session, club, name="Lent stick", is_available=False)
    await _make_stick(db_session, club, name="Mask", type=EquipmentType.MASK)
    db_session.add(CheckoutFactory.create(equipment_id=lent_stick.id, user_id=member.id))
    await db_session.commit()

    sticks = await equipment_client.get(
        f"/clubs/{club.id}/equipment", params={"type": "STICK"}
    )
    available = await equipment_client.get(
        f"/clubs/{club.id}/equipment", params={"type": "STICK", "isAvailable": "true"}
    )
    out = await equipment_client.get(
        f"/clubs/{club.id}/equipment", params={"isAvailable": "false"}
    )

    assert sticks.status_code == 200, sticks.text
    assert sticks.json()["pagination"]["total"] == 2
    assert [e["id"] for e in available.json()["data"]] == [str(free_stick.id)]
    lent = out.json()["data"]
    assert [e["id"] for e in lent] == [str(lent_stick.id)]
    assert lent[0]["is_available"] is False
    assert lent[0]["current_checkout"]["user"]["id"] == str(member.id)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_for_unknown_club_is_404(equipment_client):
    response = await equipment_client.get(f"/clubs/{uuid.uuid4()}/equipment")

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_item_reports_ledger_availability(equipment_client, db_session):
    """A stale is_available column does not hide an open checkout."""
    club = await _make_club(db_session)
    member = await _add_member(db_session, club)
    stick = await _make_stick(db_session, club, is_available=True)
    db_session.add(CheckoutFactory.create(equipment_id=stick.id, user_id=member.id))
    await db_session.commit()

    response = await equipment_client.get(f"/equipment/{stick.id}")

    assert response.status_code == 200, response.text
    assert response.json()["data"]["is_available"] is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_item(equipment_client, db_session):
    club = await _make_club(db_session)
    admin = await _add_member(db_session, club, role=ClubRole.ADMIN)
    stick = await _make_stick(db_session, club)

    response = await equipment_client.patch(
        f"/equipment/{stick.id}",
        json={"name": "Renamed", "condition": "FAIR"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["name"] == "Renamed"
    assert data["condition"] == "FAIR"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_ignores_is_available(equipment_client, db_session):
    club = await _make_club(db_session)
    admin = await _add_member(db_session, club, role=ClubRole.ADMIN)
    stick = await _make_stick(db_session, club)

    response = await equipment_client.patch(
        f"/equipment/{stick.id}",
        json={"is_available": False},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200, response.text
    assert response.json()["data"]["is_available"] is True


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_rejects_null_name_and_condition(equipment_client, db_session):
    club = await _make_club(db_session)
    admin = await _add_member(db_session, club, role=ClubRole.ADMIN)
    stick = await _make_stick(db_session, club, name="Blue stick")

    response = await equipment_client.patch(
        f"/equipment/{stick.id}",
        json={"name": None, "condition": None},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert {"name", "condition"} <= set(response.json()["errors"])
    await db_session.refresh(stick)
    assert stick.name == "Blue stick"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_checked_out_item_conflicts(equipment_client, db_session):
    club = await _make_club(db_session)
    admin = await _add_member(db_session, club, role=ClubRole.ADMIN)
    stick = await _make_stick(db_session, club)
    db_session.add(CheckoutFactory.create(equipment_id=stick.id, user_id=admin.id))
    await db_session.commit()

    response = await equipment_client.delete(
        f"/equipment/{stick.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_item_removes_history(equipment_client, db_session):
    club = await _make_club(db_session)
    admin = await _add_member(db_session, club, role=ClubRole.ADMIN)
    stick = await _make_stick(db_session, club)
    db_session.add(
        CheckoutFactory.create(
            equipment_id=stick.id, user_id=admin.id, returned_at=_now()
        )
    )
    await db_session.commit()

    response = await equipment_client.delete(
        f"/equipment/{stick.id}", headers=auth_headers(admin)
    )

    assert response.status_code == 200, response.text
    assert await db_session.scalar(
        select(func.count(Equipment.id)).where(Equipment.id == stick.id)
    ) == 0
    assert await db_session.scalar(select(func.count(EquipmentCheckout.id))) == 0


# ---------------------------------------------------------------------------
# Checkout lifecycle
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_return_and_history(equipment_client, db_session):
    club = await _make_club(db_session)
    borrower = await _add_member(db_session, club, username="borrower")
    stick = await _make_stick(db_session, club)
    headers = auth_headers(borrower)
    due = (_now() + timedelta(days=3)).isoformat()

    checkout = await equipment_client.post(
        f"/equipment/{stick.id}/checkout",
        json={"condition_out": "GOOD", "due_date": due, "notes": "Tournament"},
        headers=headers,
    )
    assert checkout.status_code == 201, checkout.text
    assert checkout.json()["data"]["user"]["username"] == "borrower"
    assert checkout.json()["data"]["equipment"]["id"] == str(stick.id)

    item = await equipment_client.get(f"/equipment/{stick.id}")
    assert item.json()["data"]["is_available"] is False
    assert item.json()["data"]["current_checkout"]["id"] == checkout.json()["data"]["id"]

    returned = await equipment_client.post(
        f"/equipment/{stick.id}/return",
        json={"condition_in": "POOR", "notes": "Blade cracked"},
        headers=headers,
    )
    assert returned.status_code == 200, returned.text
    data = returned.json()["data"]
    assert data["returned_at"] is not None
    assert data["condition_in"] == "POOR"
    assert data["notes"] == "Tournament\nReturn: Blade cracked"

    item = await equipment_client.get(f"/equipment/{stick.id}")
    assert item.json()["data"]["is_available"] is True
    assert item.json()["data"]["condition"] == "POOR"

    history = await equipment_client.get(f"/equipment/{stick.id}/history")
    assert history.status_code == 200, history.text
    body = history.json()
    assert body["data"]["equipment"]["id"] == str(stick.id)
    assert len(body["data"]["checkouts"]) == 1
    assert body["data"]["stats"]["completed_checkouts"] == 1
    assert body["data"]["stats"]["currently_checked_out"] == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_of_checked_out_item_conflicts(equipment_client, db_session):
    club = await _make_club(db_session)
    first = await _add_member(db_session, club)
    second = await _add_member(db_session, club)
    stick = await _make_stick(db_session, club)

    ok = await equipment_client.post(
        f"/equipment/{stick.id}/checkout",
        json={"condition_out": "GOOD"},
        headers=auth_headers(first),
    )
    clash = await equipment_client.post(
        f"/equipment/{stick.id}/checkout",
        json={"condition_out": "GOOD"},
        headers=auth_headers(second),
    )

    assert ok.status_code == 201, ok.text
    assert clash.status_code == 409
    assert clash.json()["detail"] == "Equipment is already checked out"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_checkout_with_past_due_date_is_400(equipment_client, db_session):
    club = await _make_club(db_session)
    member = await _add_member(db_session, club)
    stick = await _make_stick(db_session, club)

    response = await equipment_client.post(
        f"/equipment/{stick.id}/checkout",
        json={
            "condition_out": "GOOD",
            "due_date": (_now() - timedelta(days=1)).isoformat(),
        },
        headers=auth_headers(member),
    )

    assert response.status_code == 400
    assert "due_date" in response.json()["errors"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_return_of_available_item_conflicts(equipment_client, db_session):
    club = await _make_club(db_session)
    member = await _add_member(db_session, club)
    stick = await _make_stick(db_session, club)

    response = await equipment_client.post(
        f"/equipment/{stick.id}/return",
        json={"condition_in": "GOOD"},
        headers=auth_headers(member),
    )

    assert response.status_code == 409
    assert response.json()["detail"] == "Equipment is not currently checked out"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_stranger_cannot_return(equipment_client, db_session):
    club = await _make_club(db_session)
    borrower = await _add_member(db_session, club)
    stranger = await _make_user(db_session)
    stick = await _make_stick(db_session, club)
    db_session.add(CheckoutFactory.create(equipment_id=stick.id, user_id=borrower.id))
    await db_session.commit()

    response = await equipment_client.post(
        f"/equipment/{stick.id}/return",
        json={"condition_in": "GOOD"},
        headers=auth_headers(stranger),
    )

    assert response.status_code == 403
