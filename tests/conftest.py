"""Shared fixtures: in-memory SQLite database, a seeded shop and an API client"""
import os

# Configuration is read once at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REALTIME_ENABLED"] = "false"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["TWILIO_AUTH_TOKEN"] = ""
os.environ["TWILIO_WHATSAPP_FROM"] = "+14155238886"
os.environ["OPENAI_API_KEY"] = ""
os.environ["FUNCTIONS_BASE_URL"] = "http://functions.test"

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from barbershop.config.database import SessionLocal, engine, get_db
from barbershop.models import Barber, Barbershop, BarbershopSettings, Base, InventoryItem, Service

SHOP_TZ = ZoneInfo("America/Sao_Paulo")
OWNER_ID = uuid.UUID("6f1c1d7e-1111-4c4c-9a9a-000000000001")
ALL_DAYS = {str(day): {"active": True, "start": "09:00", "end": "18:00"} for day in range(7)}


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def shop(db):
    barbershop = Barbershop(
        owner_id=OWNER_ID,
        name="Barbearia do Zé",
        slug="barbearia-do-ze",
        phone="11988887777",
        timezone="America/Sao_Paulo",
        subscription_status="active",
    )
    db.add(barbershop)
    db.flush()
    db.add(BarbershopSettings(
        barbershop_id=barbershop.id,
        opening_time="08:00",
        closing_time="20:00",
        is_closed=False,
        fee_dinheiro=Decimal("0"),
        fee_pix=Decimal("0"),
        fee_debito=Decimal("2"),
        fee_credito=Decimal("5"),
    ))
    db.commit()
    db.refresh(barbershop)
    return barbershop


@pytest.fixture
def barber(db, shop):
    professional = Barber(
        barbershop_id=shop.id,
        name="Carlos",
        work_days=ALL_DAYS,
        commission_rate=Decimal("50"),
        advances=Decimal("0"),
    )
    db.add(professional)
    db.commit()
    db.refresh(professional)
    return professional


@pytest.fixture
def services(db, shop):
    corte = Service(barbershop_id=shop.id, name="Corte", price=Decimal("50.00"), duration=30)
    barba = Service(barbershop_id=shop.id, name="Barba", price=Decimal("30.00"), duration=20)
    db.add_all([corte, barba])
    db.commit()
    db.refresh(corte)
    db.refresh(barba)
    return {"corte": corte, "barba": barba}


@pytest.fixture
def pomade(db, shop):
    product = InventoryItem(
        barbershop_id=shop.id,
        name="Pomada Modeladora",
        current_stock=3,
        min_stock=1,
        price_cost=Decimal("15.00"),
        price_sell=Decimal("35.00"),
        commission_rate=Decimal("10"),
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@pytest.fixture
def shop_morning():
    """A fixed shop-local 'now' well before any test booking"""
    return datetime(2030, 1, 1, 7, 0, tzinfo=SHOP_TZ)


@pytest.fixture
def client(db):
    from barbershop.main import create_app

    app = create_app()
    app.dependency_overrides[get_db] = lambda: db
    return TestClient(app)


@pytest.fixture
def auth_headers():
    token = jwt.encode(
        {
            "sub": str(OWNER_ID),
            "aud": "authenticated",
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        },
        "test-secret",
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}
