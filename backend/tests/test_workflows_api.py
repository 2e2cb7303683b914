import pytest
from sqlalchemy import select

from urbanstay.models.property import Property
from urbanstay.models.user import UserRole


@pytest.mark.asyncio
async def test_inquiry_thread(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    buyer = await make_user()
    prop = await make_property(seller)
    await db.commit()

    created = await client.post(
        "/api/inquiries/",
        json={"property_id": prop.id, "message": "Is this still available?"},
        headers=auth_headers(buyer),
    )
    assert created.status_code == 201
    inquiry = created.json()["inquiry"]
    assert inquiry["receiver_id"] == seller.id
    assert inquiry["status"] == "pending"

    count = await db.scalar(select(Property.inquiry_count).where(Property.id == prop.id))
    assert count == 1

    received = (await client.get("/api/inquiries/received", headers=auth_headers(seller))).json()
    assert received["total"] == 1

    opened = (
        await client.get(f"/api/inquiries/{inquiry['id']}", headers=auth_headers(seller))
    ).json()["inquiry"]
    assert opened["is_read"] is True

    replied = (
        await client.post(
            f"/api/inquiries/{inquiry['id']}/replies",
            json={"message": "Yes, come by on Saturday."},
            headers=auth_headers(seller),
        )
    ).json()["inquiry"]
    assert replied["status"] == "responded"
    assert [r["message"] for r in replied["replies"]] == ["Yes, come by on Saturday."]

    back = await client.put(
        f"/api/inquiries/{inquiry['id']}/status",
        json={"status": "pending"},
        headers=auth_headers(seller),
    )
    assert back.status_code == 400


@pytest.mark.asyncio
async def test_inquiry_on_own_property_rejected(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    prop = await make_property(seller)
    await db.commit()

    resp = await client.post(
        "/api/inquiries/",
        json={"property_id": prop.id, "message": "Hello"},
        headers=auth_headers(seller),
    )

    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_outsider_cannot_read_inquiry(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    buyer = await make_user()
    outsider = await make_user()
    prop = await make_property(seller)
    await db.commit()

    inquiry_id = (
        await client.post(
            "/api/inquiries/",
            json={"property_id": prop.id, "message": "Hi"},
            headers=auth_headers(buyer),
        )
    ).json()["inquiry"]["id"]

    resp = await client.get(f"/api/inquiries/{inquiry_id}", headers=auth_headers(outsider))

    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_booking_lifecycle(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    buyer = await make_user()
    prop = await make_property(seller)
    await db.commit()

    payload = {
        "property_id": prop.id,
        "booking_type": "visit",
        "visit_date": "2026-11-01T10:00:00Z",
        "visit_time": "10:00 AM",
    }
    created = await client.post("/api/bookings/", json=payload, headers=auth_headers(buyer))
    assert created.status_code == 201
    booking_id = created.json()["booking"]["id"]

    duplicate = await client.post("/api/bookings/", json=payload, headers=auth_headers(buyer))
    assert duplicate.status_code == 400

    early = await client.put(f"/api/bookings/{booking_id}/confirm-buyer", headers=auth_headers(buyer))
    assert early.status_code == 400

    confirmed = await client.put(
        f"/api/bookings/{booking_id}/confirm-seller",
        json={"note": "See you there"},
        headers=auth_headers(seller),
    )
    assert confirmed.json()["booking"]["status"] == "confirmed"
    assert confirmed.json()["booking"]["seller_note"] == "See you there"

    acknowledged = await client.put(
        f"/api/bookings/{booking_id}/confirm-buyer", headers=auth_headers(buyer)
    )
    assert acknowledged.json()["booking"]["buyer_confirmed_at"] is not None

    completed = await client.put(f"/api/bookings/{booking_id}/complete", headers=auth_headers(seller))
    assert completed.json()["booking"]["status"] == "completed"

    cancel = await client.put(
        f"/api/bookings/{booking_id}/cancel", json={}, headers=auth_headers(buyer)
    )
    assert cancel.status_code == 400

    as_seller = (
        await client.get("/api/bookings/", params={"role": "seller"}, headers=auth_headers(seller))
    ).json()
    assert as_seller["total"] == 1


@pytest.mark.asyncio
async def test_alerts_crud_and_matches(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    buyer = await make_user()
    other = await make_user()
    match = await make_property(seller, city="Mumbai", price=7000000)
    await make_property(seller, city="Mumbai", price=9000000)
    await db.commit()

    created = await client.post(
        "/api/alerts/",
        json={"name": "Mumbai under 80L", "criteria": {"cities": ["Mumbai"], "maxPrice": 8000000}},
        headers=auth_headers(buyer),
    )
    assert created.status_code == 201
    alert = created.json()["alert"]
    assert alert["criteria"] == {"cities": ["Mumbai"], "maxPrice": 8000000.0}

    matches = (
        await client.get(f"/api/alerts/{alert['id']}/matches", headers=auth_headers(buyer))
    ).json()
    assert matches["success"] is True
    assert matches["count"] == 1
    assert [p["id"] for p in matches["properties"]] == [match.id]

    hidden = await client.get(f"/api/alerts/{alert['id']}", headers=auth_headers(other))
    assert hidden.status_code == 404

    toggled = await client.patch(f"/api/alerts/{alert['id']}/toggle", headers=auth_headers(buyer))
    assert toggled.json()["alert"]["is_active"] is False


@pytest.mark.asyncio
async def test_alert_limits(client, db, make_user, auth_headers):
    buyer = await make_user()
    await db.commit()
    headers = auth_headers(buyer)

    empty = await client.post(
        "/api/alerts/", json={"name": "Anything", "criteria": {"minPrice": "abc"}}, headers=headers
    )
    assert empty.status_code == 400

    for i in range(10):
        resp = await client.post(
            "/api/alerts/", json={"name": f"Alert {i}", "criteria": {"city": "Pune"}}, headers=headers
        )
        assert resp.status_code == 201

    over = await client.post(
        "/api/alerts/", json={"name": "One too many", "criteria": {"city": "Pune"}}, headers=headers
    )
    assert over.status_code == 400
    assert over.json()["message"] == "Maximum 10 active alerts allowed"


@pytest.mark.asyncio
async def test_favorites_toggle(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    buyer = await make_user()
    prop = await make_property(seller)
    await db.commit()
    url = f"/api/auth/favorites/{prop.id}"

    added = (await client.put(url, headers=auth_headers(buyer))).json()
    assert added["is_favorite"] is True
    assert added["favorites"] == [prop.id]

    listed = (await client.get("/api/auth/favorites", headers=auth_headers(buyer))).json()
    assert [p["id"] for p in listed["properties"]] == [prop.id]

    removed = (await client.put(url, headers=auth_headers(buyer))).json()
    assert removed["is_favorite"] is False
    assert removed["favorites"] == []


@pytest.mark.asyncio
async def test_register_and_login(client, db):
    registered = await client.post(
        "/api/auth/register",
        json={
            "email": "seller@example.com",
            "password": "secret123",
            "full_name": "Sam Seller",
            "role": "seller",
        },
    )
    assert registered.status_code == 201
    assert registered.json()["user"]["role"] == "seller"

    bad = await client.post(
        "/api/auth/login", json={"email": "seller@example.com", "password": "wrong-pass"}
    )
    assert bad.status_code == 401

    good = await client.post(
        "/api/auth/login", json={"email": "seller@example.com", "password": "secret123"}
    )
    token = good.json()["access_token"]

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["user"]["email"] == "seller@example.com"


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/api/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_alert_criteria_survive_read_and_save(client, db, make_user, auth_headers):
    buyer = await make_user()
    await db.commit()
    headers = auth_headers(buyer)

    created = await client.post(
        "/api/alerts/",
        json={
            "name": "Mumbai family flat",
            "criteria": {"city": "Mumbai", "maxPrice": "8000000", "bedrooms": "2+", "minArea": 700},
        },
        headers=headers,
    )
    alert_id = created.json()["alert"]["id"]

    fetched = (await client.get(f"/api/alerts/{alert_id}", headers=headers)).json()["alert"]
    saved = await client.put(
        f"/api/alerts/{alert_id}", json={"criteria": fetched["criteria"]}, headers=headers
    )

    assert saved.status_code == 200
    assert saved.json()["alert"]["criteria"] == fetched["criteria"]
    assert fetched["criteria"] == {
        "cities": ["Mumbai"],
        "maxPrice": 8000000.0,
        "minBedrooms": 2,
        "minArea": 700.0,
    }
