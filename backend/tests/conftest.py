import json
import os
import tempfile
from datetime import datetime, timezone

_DB_DIR = tempfile.mkdtemp(prefix="urbanstay-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from urbanstay.database import async_session_maker, drop_db, engine, init_db  # noqa: E402
from urbanstay.models.property import Property, PropertyStatus  # noqa: E402
from urbanstay.models.user import User, UserRole  # noqa: E402
from urbanstay.utils.security import create_access_token, get_password_hash  # noqa: E402


@pytest_asyncio.fixture
async def db():
    await drop_db()
    await init_db()
    async with async_session_maker() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db):
    from urbanstay.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def make_user(db):
    counter = {"n": 0}

    async def _make(role: UserRole = UserRole.USER, **overrides) -> User:
        counter["n"] += 1
        data = {
            "email": f"user{counter['n']}@example.com",
            "full_name": f"Test User {counter['n']}",
            "hashed_password": get_password_hash("secret123"),
            "role": role.value,
            "is_active": True,
        }
        data.update(overrides)
        user = User(**data)
        db.add(user)
        await db.flush()
        return user

    return _make


@pytest_asyncio.fixture
async def make_property(db):
    counter = {"n": 0}

    async def _make(owner: User, **overrides) -> Property:
        counter["n"] += 1
        n = counter["n"]
        data = {
            "slug": f"test-property-{n}",
            "title": f"Test Property {n}",
            "description": "A test listing",
            "listing_type": "buy",
            "property_type": "apartment",
            "address": f"{n} Test Street",
            "city": "Pune",
            "state": "Maharashtra",
            "pincode": "411001",
            "price": 5000000,
            "bedrooms": 2,
            "amenities": json.dumps([]),
            "highlights": json.dumps([]),
            "images": json.dumps([]),
            "owner_id": owner.id,
            "status": PropertyStatus.AVAILABLE.value,
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc).replace(day=min(n, 28)),
        }
        if "amenities" in overrides:
            overrides["amenities"] = json.dumps(overrides["amenities"])
        data.update(overrides)
        prop = Property(**data)
        db.add(prop)
        await db.flush()
        return prop

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token(user_id=user.id, email=user.email, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers
