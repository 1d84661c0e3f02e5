from __future__ import annotations

import itertools
import os
import sys
from collections.abc import Callable, Iterator
from datetime import date
from decimal import Decimal
from io import BytesIO
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_suite.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-signing-secret")
os.environ.setdefault("ENABLE_TRACING", "false")

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gelato_ops.api.deps import get_blob_store, get_db_session, get_session_factory
from gelato_ops.api.routes.auth import hash_password
from gelato_ops.core.config import get_settings
from gelato_ops.db.session import enable_sqlite_savepoints
from gelato_ops.main import app
from gelato_ops.models import AdminUser, Base, Client, Order, OrderLineItem, Product
from gelato_ops.services.blob_store import S3BlobStore
from gelato_ops.services.financials import to_money

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "changeme123"


class InMemoryS3Client:
    """Simple in-memory S3 stub for blob store tests."""

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, bytes]] = {}
        self.fail_puts = False

    def head_bucket(self, *, Bucket: str) -> None:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")

    def create_bucket(self, *, Bucket: str, **_: object) -> None:
        self._buckets.setdefault(Bucket, {})

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str | None = None,
        **_: object,
    ) -> dict[str, str]:
        if self.fail_puts:
            raise ClientError({"Error": {"Code": "500", "Message": "Unavailable"}}, "PutObject")
        self._buckets.setdefault(Bucket, {})[Key] = Body
        return {"ETag": "in-memory"}

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, BytesIO]:
        return {"Body": BytesIO(self._buckets[Bucket][Key])}

    def delete_objects(self, *, Bucket: str, Delete: dict[str, list[dict[str, str]]]) -> dict[str, object]:
        bucket = self._buckets.get(Bucket, {})
        for entry in Delete["Objects"]:
            bucket.pop(entry["Key"], None)
        return {"Deleted": Delete["Objects"]}

    def keys(self, bucket: str) -> set[str]:
        return set(self._buckets.get(bucket, {}))


engine = create_engine(
    "sqlite+pysqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_savepoints(engine)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def s3_client() -> InMemoryS3Client:
    return InMemoryS3Client()


@pytest.fixture()
def blob_store(s3_client: InMemoryS3Client) -> S3BlobStore:
    return S3BlobStore(settings=get_settings(), s3_client_factory=lambda: s3_client)


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client_factory(db_session: Session) -> Callable[..., Client]:
    def _create(client_id: str = "client-alpha", business_name: str = "Alpha Co", **fields: object) -> Client:
        fields.setdefault("email", f"{client_id}@example.com")
        record = Client(id=client_id, business_name=business_name, **fields)
        db_session.add(record)
        db_session.commit()
        return record

    return _create


@pytest.fixture()
def make_item() -> Callable[..., OrderLineItem]:
    def _item(
        product_name: str,
        quantity: int,
        unit_price: str,
        *,
        product: Product | None = None,
        product_type: str | None = None,
        billing_name: str | None = None,
    ) -> OrderLineItem:
        price = Decimal(unit_price)
        return OrderLineItem(
            product=product,
            product_name=product_name,
            product_type=product_type,
            billing_name=billing_name,
            quantity=quantity,
            unit_price=price,
            subtotal=to_money(price * quantity),
        )

    return _item


@pytest.fixture()
def order_factory(db_session: Session) -> Callable[..., Order]:
    counter = itertools.count(1)

    def _create(
        client: Client,
        delivery_date: date,
        total_amount: str,
        *,
        items: tuple[OrderLineItem, ...] = (),
        invoice_id: str | None = None,
        **fields: object,
    ) -> Order:
        number = next(counter)
        fields.setdefault("order_date", delivery_date)
        order = Order(
            client_id=client.id,
            delivery_date=delivery_date,
            total_amount=Decimal(total_amount),
            invoice_id=invoice_id or f"INV-{number:04d}",
            **fields,
        )
        order.items.extend(items)
        db_session.add(order)
        db_session.commit()
        return order

    return _create


@pytest.fixture()
def admin_user(db_session: Session) -> AdminUser:
    user = AdminUser(email=ADMIN_EMAIL, full_name="Ops Admin", hashed_password=hash_password(ADMIN_PASSWORD))
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture()
def client(db_session: Session, blob_store: S3BlobStore) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(client: TestClient, admin_user: AdminUser) -> dict[str, str]:
    response = client.post(
        "/api/auth/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}
