"""Seed database with sample listings for local development."""

import asyncio
import json
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from urbanstay.api.properties import make_slug
from urbanstay.database import async_session_maker, engine, init_db
from urbanstay.models.property import (
    Furnishing,
    ListingType,
    Property,
    PropertyStatus,
    PropertyType,
)
from urbanstay.models.user import User, UserRole
from urbanstay.utils.security import get_password_hash


SAMPLE_PROPERTIES = [
    {
        "title": "Spacious 2BHK Apartment in Baner",
        "description": "Modern 2BHK close to IT parks and schools.",
        "listing_type": ListingType.BUY.value,
        "property_type": PropertyType.APARTMENT.value,
        "address": "12 Baner Road, Baner",
        "city": "Pune",
        "state": "Maharashtra",
        "pincode": "411045",
        "locality": "Baner",
        "price": 7500000,  # 75 lakhs
        "bedrooms": 2,
        "bathrooms": 2,
        "carpet_area": 950,
        "furnishing": Furnishing.SEMI_FURNISHED.value,
        "amenities": ["gym", "parking", "security"],
        "is_featured": True,
    },
    {
        "title": "Luxury 3BHK Villa in Koregaon Park",
        "description": "Independent villa with private garden.",
        "listing_type": ListingType.BUY.value,
        "property_type": PropertyType.VILLA.value,
        "address": "7 Lane 5, Koregaon Park",
        "city": "Pune",
        "state": "Maharashtra",
        "pincode": "411001",
        "locality": "Koregaon Park",
        "price": 32000000,  # 3.2 crores
        "bedrooms": 3,
        "bathrooms": 4,
        "carpet_area": 2800,
        "furnishing": Furnishing.FULLY_FURNISHED.value,
        "amenities": ["garden", "parking", "power-backup"],
        "is_featured": False,
    },
    {
        "title": "Sea-facing 1BHK for Rent in Bandra",
        "description": "Compact furnished flat, walking distance to the station.",
        "listing_type": ListingType.RENT.value,
        "property_type": PropertyType.APARTMENT.value,
        "address": "21 Carter Road, Bandra West",
        "city": "Mumbai",
        "state": "Maharashtra",
        "pincode": "400050",
        "locality": "Bandra West",
        "price": 65000,
        "bedrooms": 1,
        "bathrooms": 1,
        "carpet_area": 480,
        "furnishing": Furnishing.FULLY_FURNISHED.value,
        "amenities": ["lift", "security"],
        "is_featured": False,
    },
    {
        "title": "Office Space on Outer Ring Road",
        "description": "Plug-and-play office floor for IT teams.",
        "listing_type": ListingType.RENT.value,
        "property_type": PropertyType.OFFICE.value,
        "address": "88 Outer Ring Road, Marathahalli",
        "city": "Bangalore",
        "state": "Karnataka",
        "pincode": "560103",
        "locality": "Marathahalli",
        "price": 350000,
        "bedrooms": None,
        "bathrooms": 4,
        "carpet_area": 3000,
        "furnishing": Furnishing.FULLY_FURNISHED.value,
        "amenities": ["cafeteria", "parking", "power-backup"],
        "is_featured": True,
    },
]


async def seed_properties():
    """Add sample listings owned by a demo seller."""
    async with async_session_maker() as db:
        result = await db.execute(select(User).where(User.email == "admin@urbanstay.in"))
        if not result.scalar_one_or_none():
            db.add(User(
                email="admin@urbanstay.in",
                full_name="Admin User",
                hashed_password=get_password_hash("admin123"),
                role=UserRole.ADMIN.value,
                is_active=True,
            ))

        result = await db.execute(select(User).where(User.email == "seller@urbanstay.in"))
        seller = result.scalar_one_or_none()
        if not seller:
            seller = User(
                email="seller@urbanstay.in",
                full_name="Demo Seller",
                hashed_password=get_password_hash("seller123"),
                role=UserRole.SELLER.value,
                company_name="Demo Realty",
                is_active=True,
            )
            db.add(seller)
            await db.flush()

        existing_count = await db.scalar(select(func.count(Property.id))) or 0
        if existing_count > 0:
            print(f"Database already has {existing_count} properties. Skipping seed.")
            await db.commit()
            return

        featured_until = datetime.now(timezone.utc) + timedelta(days=30)
        for prop_data in SAMPLE_PROPERTIES:
            data = dict(prop_data)
            amenities = data.pop("amenities")
            db.add(Property(
                **data,
                slug=make_slug(data["title"]),
                amenities=json.dumps(amenities),
                highlights=json.dumps([]),
                images=json.dumps([]),
                featured_until=featured_until if data["is_featured"] else None,
                owner_id=seller.id,
                status=PropertyStatus.AVAILABLE.value,
            ))

        await db.commit()
        print(f"Successfully added {len(SAMPLE_PROPERTIES)} sample properties!")


async def main():
    """Run the seed script."""
    await init_db()
    await seed_properties()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
