"""
Shared pytest fixtures.

Tests run against an in-memory SQLite database; DATABASE_URL is set before
smartour is imported so the module-level engine never points at MySQL.

Provides:
- db_session: session on a freshly created schema
- data: builder for tours, customers, campaigns, reservations, survey rows
- client: FastAPI TestClient whose get_db yields db_session
"""

import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date, timedelta
from itertools import count

import pytest
from fastapi.testclient import TestClient

from smartour.db.database import SessionLocal, engine, get_db
from smartour.db.models import Base, Campaign, Customer, Reservation, SurveyResponse, Tour


class DataBuilder:
    """Inserts rows with sensible defaults; every helper returns the ORM object."""

    def __init__(self, db):
        self.db = db
        self._ids = count(1)

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        return obj

    def tour(self, name=None, tour_type="Kültür", capacity=20, price=1000.0, cost=600.0,
             days=3, occupancy=70.0):
        tid = next(self._ids)
        return self._save(Tour(
            tur_id=tid, tur_adi=name or f"Tur {tid}", tur_turu=tour_type, kapasite=capacity,
            fiyat=price, maliyet=cost, sure_gun=days, doluluk_orani=occupancy,
        ))

    def customer(self, age=30):
        return self._save(Customer(musteri_id=next(self._ids), yas=age))

    def campaign(self, name=None, discount=10.0, start=None, end=None):
        cid = next(self._ids)
        return self._save(Campaign(
            kampanya_id=cid, kampanya_adi=name or f"Kampanya {cid}", indirim_orani=discount,
            baslangic_tarihi=start or date(2026, 1, 1), bitis_tarihi=end or date(2026, 1, 31),
        ))

    def reservation(self, tour, on=None, profit=100.0, campaign=None, customer=None, party=1,
                    total_price=None):
        return self._save(Reservation(
            rezervasyon_id=next(self._ids),
            tur_id=tour.tur_id,
            musteri_id=customer.musteri_id if customer else None,
            kampanya_id=campaign.kampanya_id if campaign else None,
            rezervasyon_tarihi=on or date.today(),
            kisi_sayisi=party,
            toplam_fiyat=total_price,
            kar=profit,
        ))

    def survey(self, customer=None, **answers):
        return self._save(SurveyResponse(
            anket_id=next(self._ids),
            musteri_id=customer.musteri_id if customer else None,
            **answers,
        ))


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def data(db_session):
    return DataBuilder(db_session)


@pytest.fixture
def client(db_session):
    from smartour.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def today():
    return date.today()


def days_ago(n, today=None):
    return (today or date.today()) - timedelta(days=n)


@pytest.fixture
def ago(today):
    """ago(20) -> the date 20 days before today."""
    return lambda n: days_ago(n, today)
