from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select

from urbanstay.models.property import Property, PropertyStatus
from urbanstay.models.review import Review
from urbanstay.models.user import Favorite, UserRole


def _day(n: int) -> datetime:
    return datetime(2024, 5, n, tzinfo=timezone.utc)


NEW_LISTING = {
    "title": "Bright 2BHK near Metro",
    "description": "Close to the metro station.",
    "listing_type": "buy",
    "property_type": "apartment",
    "price": 6500000,
    "location": {
        "address": "14 Station Road, Aundh",
        "city": "Pune",
        "state": "Maharashtra",
        "pincode": "411007",
        "locality": "Aundh",
    },
    "specifications": {"bedrooms": 2, "bathrooms": 2, "carpet_area": 850},
    "amenities": ["gym", "parking"],
    "images": [
        {"url": "https://img.example.com/1.jpg"},
        {"url": "https://img.example.com/2.jpg"},
    ],
}


@pytest.mark.asyncio
async def test_search_envelope(client, db, make_user, make_property):
    seller = await make_user(UserRole.SELLER)
    older = await make_property(seller, city="Pune", price=6000000, bedrooms=2, created_at=_day(1))
    newer = await make_property(seller, city="Pune", price=9000000, bedrooms=2, created_at=_day(2))
    await make_property(seller, city="Pune", price=12000000, bedrooms=2, created_at=_day(3))
    await make_property(seller, city="Pune", price=7000000, bedrooms=3, created_at=_day(4))
    await make_property(seller, city="Mumbai", price=7000000, bedrooms=2, created_at=_day(5))
    await db.commit()

    resp = await client.get(
        "/api/properties/",
        params={"city": "Pune", "minPrice": "5000000", "maxPrice": "10000000", "bedrooms": "2"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["total"] == 2
    assert body["pages"] == 1
    assert body["page"] == 1
    assert body["count"] == 2
    assert [p["id"] for p in body["properties"]] == [newer.id, older.id]
    assert body["properties"][0]["owner"]["id"] == seller.id
    assert body["properties"][0]["location"]["city"] == "Pune"


@pytest.mark.asyncio
async def test_bad_numeric_query_values_are_ignored(client, db, make_user, make_property):
    seller = await make_user(UserRole.SELLER)
    for _ in range(3):
        await make_property(seller)
    await db.commit()

    resp = await client.get("/api/properties/", params={"minPrice": "cheap", "maxArea": "big"})

    assert resp.status_code == 200
    assert resp.json()["total"] == 3


@pytest.mark.asyncio
async def test_out_of_range_page(client, db, make_user, make_property):
    seller = await make_user(UserRole.SELLER)
    for _ in range(3):
        await make_property(seller)
    await db.commit()

    body = (await client.get("/api/properties/", params={"page": 9, "limit": 2})).json()

    assert body["properties"] == []
    assert body["count"] == 0
    assert body["total"] == 3
    assert body["pages"] == 2


@pytest.mark.asyncio
async def test_unusable_paging_values_fall_back_to_defaults(client, db, make_user, make_property):
    seller = await make_user(UserRole.SELLER)
    for _ in range(3):
        await make_property(seller)
    await db.commit()

    resp = await client.get("/api/properties/", params={"page": 0, "limit": "abc"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["page"] == 1
    assert body["count"] == 3

    negative = (await client.get("/api/properties/", params={"page": "-2", "limit": 2})).json()
    assert negative["page"] == 1
    assert negative["count"] == 2


@pytest.mark.asyncio
async def test_invalid_body_is_a_400_envelope(client, db, make_user, auth_headers):
    seller = await make_user(UserRole.SELLER)
    await db.commit()
    listing = {k: v for k, v in NEW_LISTING.items() if k != "price"}

    resp = await client.post("/api/properties/", json=listing, headers=auth_headers(seller))

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert body["errors"]


@pytest.mark.asyncio
async def test_missing_property_is_404(client, db):
    resp = await client.get("/api/properties/999")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Property not found"}


@pytest.mark.asyncio
async def test_each_detail_fetch_counts_a_view(client, db, make_user, make_property):
    seller = await make_user(UserRole.SELLER)
    prop = await make_property(seller)
    await db.commit()

    first = await client.get(f"/api/properties/{prop.id}")
    second = await client.get(f"/api/properties/{prop.id}")
    by_slug = await client.get(f"/api/properties/slug/{prop.slug}")

    assert first.json()["property"]["views"] == 1
    assert second.json()["property"]["views"] == 2
    assert by_slug.json()["property"]["views"] == 3

    await db.refresh(prop)
    assert prop.views == 3


@pytest.mark.asyncio
async def test_seller_creates_listing(client, db, make_user, auth_headers):
    seller = await make_user(UserRole.SELLER)
    await db.commit()

    resp = await client.post("/api/properties/", json=NEW_LISTING, headers=auth_headers(seller))

    assert resp.status_code == 201
    prop = resp.json()["property"]
    assert prop["slug"].startswith("bright-2bhk-near-metro-")
    assert prop["status"] == "available"
    assert prop["owner"]["id"] == seller.id
    assert [img["is_primary"] for img in prop["images"]] == [True, False]


@pytest.mark.asyncio
async def test_plain_user_cannot_create_listing(client, db, make_user, auth_headers):
    buyer = await make_user()
    await db.commit()

    resp = await client.post("/api/properties/", json=NEW_LISTING, headers=auth_headers(buyer))

    assert resp.status_code == 403
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client, db):
    resp = await client.post("/api/properties/", json=NEW_LISTING)

    assert resp.status_code in (401, 403)
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_status_update_follows_transitions(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    prop = await make_property(seller)
    await db.commit()
    headers = auth_headers(seller)

    sold = await client.put(f"/api/properties/{prop.id}", json={"status": "sold"}, headers=headers)
    assert sold.status_code == 200
    assert sold.json()["property"]["status"] == "sold"

    illegal = await client.put(f"/api/properties/{prop.id}", json={"status": "rented"}, headers=headers)
    assert illegal.status_code == 400
    assert illegal.json()["message"] == "Cannot change property status from 'sold' to 'rented'"

    result = await db.execute(
        select(Property.status).where(Property.id == prop.id)
    )
    assert result.scalar_one() == PropertyStatus.SOLD.value


@pytest.mark.asyncio
async def test_only_owner_or_admin_can_update(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    intruder = await make_user(UserRole.SELLER)
    admin = await make_user(UserRole.ADMIN)
    prop = await make_property(seller)
    await db.commit()

    denied = await client.put(
        f"/api/properties/{prop.id}", json={"price": 1}, headers=auth_headers(intruder)
    )
    allowed = await client.put(
        f"/api/properties/{prop.id}", json={"price": 4200000}, headers=auth_headers(admin)
    )

    assert denied.status_code == 403
    assert allowed.status_code == 200
    assert allowed.json()["property"]["price"] == 4200000


@pytest.mark.asyncio
async def test_my_properties_includes_every_status(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    other = await make_user(UserRole.SELLER)
    await make_property(seller)
    await make_property(seller, status=PropertyStatus.SOLD.value)
    await make_property(other)
    await db.commit()

    body = (await client.get("/api/properties/user/my", headers=auth_headers(seller))).json()

    assert body["total"] == 2
    assert {s["status"]: s["count"] for s in body["stats"]} == {"available": 1, "sold": 1}


@pytest.mark.asyncio
async def test_admin_features_property(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    admin = await make_user(UserRole.ADMIN)
    prop = await make_property(seller)
    await make_property(seller)
    await db.commit()

    resp = await client.put(
        f"/api/properties/{prop.id}/feature", json={"days": 7}, headers=auth_headers(admin)
    )
    assert resp.status_code == 200
    assert resp.json()["property"]["is_featured"] is True

    featured = (await client.get("/api/properties/featured")).json()
    assert [p["id"] for p in featured["properties"]] == [prop.id]


@pytest.mark.asyncio
async def test_similar_properties(client, db, make_user, make_property):
    seller = await make_user(UserRole.SELLER)
    base = await make_property(seller, city="Pune", price=5000000, property_type="apartment")
    same_city = await make_property(seller, city="Pune", price=20000000, property_type="villa")
    near_price = await make_property(seller, city="Nagpur", price=5500000, property_type="villa")
    await make_property(seller, city="Nagpur", price=20000000, property_type="villa")
    await make_property(seller, city="Pune", price=5000000, listing_type="rent")
    await db.commit()

    body = (await client.get(f"/api/properties/{base.id}/similar")).json()

    assert {p["id"] for p in body["properties"]} == {same_city.id, near_price.id}


@pytest.mark.asyncio
async def test_city_stats(client, db, make_user, make_property):
    seller = await make_user(UserRole.SELLER)
    await make_property(seller, city="Pune", price=4000000)
    await make_property(seller, city="Pune", price=6000000)
    await make_property(seller, city="Mumbai", price=9000000)
    await make_property(seller, city="Mumbai", status=PropertyStatus.SOLD.value)
    await db.commit()

    cities = (await client.get("/api/properties/stats/cities")).json()["cities"]

    assert cities[0] == {"city": "Pune", "count": 2, "avg_price": 5000000.0}
    assert cities[1]["city"] == "Mumbai"
    assert cities[1]["count"] == 1


@pytest.mark.asyncio
async def test_deleted_listing_takes_its_reviews_and_id_with_it(
    client, db, make_user, auth_headers
):
    seller = await make_user(UserRole.SELLER)
    buyer = await make_user()
    await db.commit()
    review = {"rating": 4, "title": "Nice flat", "comment": "Good light and quiet street."}

    first = await client.post("/api/properties/", json=NEW_LISTING, headers=auth_headers(seller))
    old_id = first.json()["property"]["id"]
    reviewed = await client.post(
        "/api/reviews/", json={**review, "property_id": old_id}, headers=auth_headers(buyer)
    )
    assert reviewed.status_code == 201
    await client.put(f"/api/auth/favorites/{old_id}", headers=auth_headers(buyer))

    deleted = await client.delete(f"/api/properties/{old_id}", headers=auth_headers(seller))
    assert deleted.status_code == 200

    second = await client.post(
        "/api/properties/", json={**NEW_LISTING, "title": "Flat B"}, headers=auth_headers(seller)
    )
    new_id = second.json()["property"]["id"]
    assert new_id != old_id

    fresh = await client.post(
        "/api/reviews/", json={**review, "property_id": new_id}, headers=auth_headers(buyer)
    )
    assert fresh.status_code == 201

    leftover_reviews = await db.scalar(
        select(func.count()).select_from(Review).where(Review.property_id == old_id)
    )
    leftover_favorites = await db.scalar(
        select(func.count()).select_from(Favorite).where(Favorite.property_id == old_id)
    )
    assert leftover_reviews == 0
    assert leftover_favorites == 0
