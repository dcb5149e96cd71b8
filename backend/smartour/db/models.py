"""
Database models -- SQLAlchemy ORM definitions.
Mirror of the transactional schema owned by the booking system.
The reporting layer only reads these tables.
"""

from sqlalchemy import Column, Integer, Float, String, Text, Date, ForeignKey
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Tour(Base):
    """Tours on sale. doluluk_orani is the occupancy snapshot (0-100)."""
    __tablename__ = "turlar"

    tur_id = Column(Integer, primary_key=True)
    tur_adi = Column(String(255), nullable=False)
    tur_turu = Column(String(100), index=True)
    kapasite = Column(Integer)
    fiyat = Column(Float)
    maliyet = Column(Float)
    sure_gun = Column(Integer)
    doluluk_orani = Column(Float)


class Customer(Base):
    __tablename__ = "musteriler"

    musteri_id = Column(Integer, primary_key=True)
    yas = Column(Integer)


class Campaign(Base):
    __tablename__ = "kampanyalar"

    kampanya_id = Column(Integer, primary_key=True)
    kampanya_adi = Column(String(255), nullable=False)
    indirim_orani = Column(Float)
    baslangic_tarihi = Column(Date)
    bitis_tarihi = Column(Date)


class Reservation(Base):
    """
    One booking. kar is the stored profit (price paid minus cost, after discount).
    kampanya_id is null for bookings made without a campaign.
    """
    __tablename__ = "rezervasyon"

    rezervasyon_id = Column(Integer, primary_key=True)
    tur_id = Column(Integer, ForeignKey("turlar.tur_id"), index=True)
    musteri_id = Column(Integer, ForeignKey("musteriler.musteri_id"), index=True)
    kampanya_id = Column(Integer, ForeignKey("kampanyalar.kampanya_id"), index=True)
    rezervasyon_tarihi = Column(Date, index=True)
    kisi_sayisi = Column(Integer)
    toplam_fiyat = Column(Float)
    kar = Column(Float)


class SurveyResponse(Base):
    """
    Customer survey answers. Answer columns are free text and were added
    over time, so reports resolve them at runtime (see smartour.db.schema).
    """
    __tablename__ = "anket_musteri"

    anket_id = Column(Integer, primary_key=True)
    musteri_id = Column(Integer, ForeignKey("musteriler.musteri_id"), index=True)
    oncelikli_ozellik = Column(Text)
    aktivite_tercihi = Column(Text)
    kampanya_etkisi = Column(Text)
    tatil_sikligi = Column(Text)
