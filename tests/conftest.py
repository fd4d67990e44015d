"""
Shared fixtures.

Settings are read from the environment at import time, so the test
environment has to be in place before anything from `storefront` is imported.
"""
import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")

os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'storefront.db')}"
os.environ["JWT_SECRET"] = "test-secret-for-storefront-tests-0123456789"
os.environ["COOKIE_SECURE"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from storefront.api import create_app  # noqa: E402
from storefront.data.database import Base, SessionLocal, engine  # noqa: E402
from storefront.data.models import (  # noqa: E402
    AnalyticsModel,
    BrandModel,
    CartLineModel,
    MediaModel,
    ProductModel,
    SizeModel,
    UserModel,
)
from storefront.services.passwords import hash_password  # noqa: E402

SHOPPER_EMAIL = "shopper@example.com"
SHOPPER_PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def catalog(db_session):
    """
    Two products:
    - 7 "Men Slim Fit Casual Shirt" (Roadster), sizes 1 (S) and 2 (M), 40% off,
      first media is a video, second an image
    - 5 "Unisex Running Shoes" (Puma), size 3 (UK8), no media
    """
    roadster = BrandModel(id=1, name="Roadster", description="A Good Brand")
    puma = BrandModel(id=2, name="Puma", description="A Good Brand")

    shirt = ProductModel(id=7, name="Men Slim Fit Casual Shirt", base_colour="Navy Blue", brand=roadster)
    shirt.sizes = [
        SizeModel(id=1, label="S", available=True, mrp=1199, discount_percentage=40),
        SizeModel(id=2, label="M", available=True, mrp=1299, discount_percentage=40),
    ]
    shirt.medias = [
        MediaModel(id=1, type="video", url="https://cdn.example.com/7/spin.mp4"),
        MediaModel(id=2, type="image", url="https://cdn.example.com/7/front.jpg"),
    ]
    shirt.analytic = AnalyticsModel(article_type="Shirts", gender="men", category="Topwear")

    shoes = ProductModel(id=5, name="Unisex Running Shoes", base_colour="Black", brand=puma)
    shoes.sizes = [SizeModel(id=3, label="UK8", available=True, mrp=2499, discount_percentage=0)]
    shoes.analytic = AnalyticsModel(article_type="Sports Shoes", gender="unisex", category="Shoes")

    db_session.add_all([roadster, puma, shirt, shoes])
    db_session.commit()

    return {"shirt": 7, "shoes": 5, "size_s": 1, "size_m": 2, "size_uk8": 3}


@pytest.fixture
def user_id(db_session):
    user = UserModel(email="direct@example.com", hashed_password=hash_password("pw"))
    db_session.add(user)
    db_session.commit()
    return user.id


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_client(client):
    """Client with a fresh account and the identity cookie in its jar."""
    response = client.post(
        "/api/auth/signup",
        json={"email": SHOPPER_EMAIL, "password": SHOPPER_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def other_client(app):
    with TestClient(app) as c:
        response = c.post(
            "/api/auth/signup",
            json={"email": "other@example.com", "password": "another-pass"},
        )
        assert response.status_code == 200
        yield c


@pytest.fixture
def ledger():
    """Reads cart_lines through a fresh session: [(user_id, product_id, size_id, quantity)]."""

    def _rows():
        db = SessionLocal()
        try:
            return sorted(
                (line.user_id, line.product_id, line.size_id, line.quantity)
                for line in db.query(CartLineModel).all()
            )
        finally:
            db.close()

    return _rows
