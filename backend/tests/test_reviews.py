import pytest
from sqlalchemy import func, select

from urbanstay.models.review import Review, ReviewStatus
from urbanstay.models.user import UserRole


def _review(property_id: int, **overrides) -> dict:
    data = {
        "property_id": property_id,
        "rating": 4,
        "title": "Great location",
        "comment": "Close to everything we needed.",
        "pros": ["location"],
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
async def test_duplicate_review_is_rejected_and_original_kept(
    client, db, make_user, make_property, auth_headers
):
    seller = await make_user(UserRole.SELLER)
    reviewer = await make_user()
    prop = await make_property(seller)
    await db.commit()
    headers = auth_headers(reviewer)

    first = await client.post("/api/reviews/", json=_review(prop.id), headers=headers)
    assert first.status_code == 201
    assert first.json()["review"]["status"] == ReviewStatus.PENDING.value

    second = await client.post(
        "/api/reviews/",
        json=_review(prop.id, rating=1, title="Changed my mind"),
        headers=headers,
    )
    assert second.status_code == 400
    assert second.json() == {"success": False, "message": "Already reviewed"}

    reviews = (
        await db.execute(select(Review).where(Review.property_id == prop.id))
    ).scalars().all()
    assert len(reviews) == 1
    assert reviews[0].rating == 4
    assert reviews[0].title == "Great location"


@pytest.mark.asyncio
async def test_owner_cannot_review_own_property(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    prop = await make_property(seller)
    await db.commit()

    resp = await client.post("/api/reviews/", json=_review(prop.id), headers=auth_headers(seller))

    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_only_approved_reviews_are_public(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    admin = await make_user(UserRole.ADMIN)
    first = await make_user()
    second = await make_user()
    prop = await make_property(seller)
    await db.commit()

    approved_id = (
        await client.post("/api/reviews/", json=_review(prop.id), headers=auth_headers(first))
    ).json()["review"]["id"]
    await client.post("/api/reviews/", json=_review(prop.id), headers=auth_headers(second))

    moderated = await client.put(
        f"/api/reviews/{approved_id}/moderate",
        json={"status": "approved"},
        headers=auth_headers(admin),
    )
    assert moderated.status_code == 200

    body = (await client.get(f"/api/reviews/property/{prop.id}")).json()
    assert body["total"] == 1
    assert [r["id"] for r in body["reviews"]] == [approved_id]

    pending = (await client.get("/api/reviews/pending", headers=auth_headers(admin))).json()
    assert pending["total"] == 1


@pytest.mark.asyncio
async def test_author_edit_returns_review_to_moderation(
    client, db, make_user, make_property, auth_headers
):
    seller = await make_user(UserRole.SELLER)
    admin = await make_user(UserRole.ADMIN)
    reviewer = await make_user()
    prop = await make_property(seller)
    await db.commit()

    review_id = (
        await client.post("/api/reviews/", json=_review(prop.id), headers=auth_headers(reviewer))
    ).json()["review"]["id"]
    await client.put(
        f"/api/reviews/{review_id}/moderate",
        json={"status": "approved"},
        headers=auth_headers(admin),
    )

    edited = await client.put(
        f"/api/reviews/{review_id}",
        json={"comment": "Still great, but noisy at night."},
        headers=auth_headers(reviewer),
    )

    assert edited.status_code == 200
    assert edited.json()["review"]["status"] == "pending"
    assert edited.json()["review"]["comment"] == "Still great, but noisy at night."


@pytest.mark.asyncio
async def test_helpful_votes_are_counted_once_per_user(
    client, db, make_user, make_property, auth_headers
):
    seller = await make_user(UserRole.SELLER)
    reviewer = await make_user()
    voter = await make_user()
    prop = await make_property(seller)
    await db.commit()

    review_id = (
        await client.post("/api/reviews/", json=_review(prop.id), headers=auth_headers(reviewer))
    ).json()["review"]["id"]

    url = f"/api/reviews/{review_id}/vote"
    await client.post(url, json={"is_helpful": True}, headers=auth_headers(voter))
    again = await client.post(url, json={"is_helpful": True}, headers=auth_headers(voter))
    assert again.json()["helpful_votes"] == 1

    flipped = await client.post(url, json={"is_helpful": False}, headers=auth_headers(voter))
    assert flipped.json()["helpful_votes"] == 0

    own = await client.post(url, json={"is_helpful": True}, headers=auth_headers(reviewer))
    assert own.status_code == 400


@pytest.mark.asyncio
async def test_only_property_owner_responds(client, db, make_user, make_property, auth_headers):
    seller = await make_user(UserRole.SELLER)
    reviewer = await make_user()
    prop = await make_property(seller)
    await db.commit()

    review_id = (
        await client.post("/api/reviews/", json=_review(prop.id), headers=auth_headers(reviewer))
    ).json()["review"]["id"]

    denied = await client.post(
        f"/api/reviews/{review_id}/respond", json={"message": "Thanks!"}, headers=auth_headers(reviewer)
    )
    allowed = await client.post(
        f"/api/reviews/{review_id}/respond", json={"message": "Thanks!"}, headers=auth_headers(seller)
    )

    assert denied.status_code == 403
    assert allowed.json()["review"]["owner_response"] == "Thanks!"
    assert await db.scalar(select(func.count(Review.id))) == 1
