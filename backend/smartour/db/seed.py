"""
Deterministic demo dataset for local dashboards and API smoke tests.

Reservations are spread over the four months before `today` so every
rolling window (30 / 60 / 90 days) has data.
"""

from datetime import date, timedelta
from typing import Optional
import logging
import random

from sqlalchemy.orm import Session

from smartour.db.models import Campaign, Customer, Reservation, SurveyResponse, Tour

logger = logging.getLogger(__name__)

DEMO_TOURS = [
    # tur_adi, tur_turu, kapasite, fiyat, maliyet, sure_gun, doluluk_orani
    ("Kapadokya Balon Turu", "Kültür", 40, 4500.0, 2800.0, 2, 82.0),
    ("Efes ve Şirince", "Kültür", 35, 3200.0, 2100.0, 1, 38.0),
    ("Likya Yolu Yürüyüşü", "Doğa", 20, 9800.0, 6500.0, 7, 47.5),
    ("Karadeniz Yaylaları", "Doğa", 30, 7600.0, 5200.0, 5, 61.0),
    ("Ege Koyları Mavi Tur", "Deniz", 16, 14500.0, 9800.0, 6, 90.0),
    ("Antalya Her Şey Dahil", "Deniz", 60, 8900.0, 6900.0, 4, 55.0),
    ("Gaziantep Gastronomi", "Gastronomi", 25, 5100.0, 3300.0, 3, 29.0),
    ("Mardin Taş Evleri", "Kültür", 25, 6200.0, 4100.0, None, 52.0),
]

DEMO_CAMPAIGNS = [
    # kampanya_adi, indirim_orani, start offset (days before today), length in days
    ("Erken Rezervasyon", 15.0, 100, 30),
    ("Bahar Fırsatı", 10.0, 55, 20),
    ("Son Dakika", 25.0, 20, 14),
]

IMPACT_ANSWERS = ["Çok etkiledi", "Biraz etkiledi", "Hiç etkilemedi", "Kararsızım", "4", "Etkiledi", "Kesinlikle"]
FREQUENCY_ANSWERS = ["1", "2", "Yılda iki kez", "3", "Dört veya daha fazla", "5", "Bir"]
PRIORITY_ANSWERS = ["Fiyat", "Konfor", "Rehber kalitesi", "Fiyat", "Güvenlik", "Konaklama"]
ACTIVITY_ANSWERS = ["Doğa yürüyüşü", "Müze gezisi", "Yüzme", "Yerel yemekler", "Fotoğrafçılık"]


def seed_demo(db: Session, today: Optional[date] = None, reservations: int = 240, seed: int = 42) -> int:
    """Insert the demo dataset and return the number of reservations created."""
    today = today or date.today()
    rng = random.Random(seed)

    tours = [
        Tour(tur_id=i, tur_adi=name, tur_turu=kind, kapasite=cap, fiyat=price,
             maliyet=cost, sure_gun=days, doluluk_orani=occ)
        for i, (name, kind, cap, price, cost, days, occ) in enumerate(DEMO_TOURS, start=1)
    ]
    campaigns = [
        Campaign(kampanya_id=i, kampanya_adi=name, indirim_orani=rate,
                 baslangic_tarihi=today - timedelta(days=offset),
                 bitis_tarihi=today - timedelta(days=offset - length))
        for i, (name, rate, offset, length) in enumerate(DEMO_CAMPAIGNS, start=1)
    ]
    customers = [
        Customer(musteri_id=i, yas=rng.choice([None, 16] + list(range(18, 75))))
        for i in range(1, 121)
    ]
    db.add_all(tours + campaigns + customers)
    db.flush()

    created = 0
    for i in range(1, reservations + 1):
        tour = rng.choice(tours)
        booked_on = today - timedelta(days=rng.randint(0, 120))
        party = rng.randint(1, 4)
        campaign = next(
            (c for c in campaigns if c.baslangic_tarihi <= booked_on <= c.bitis_tarihi and rng.random() < 0.6),
            None,
        )
        rate = campaign.indirim_orani if campaign else 0.0
        paid = tour.fiyat * party * (1 - rate / 100)
        db.add(Reservation(
            rezervasyon_id=i,
            tur_id=tour.tur_id,
            musteri_id=rng.choice(customers).musteri_id,
            kampanya_id=campaign.kampanya_id if campaign else None,
            rezervasyon_tarihi=booked_on,
            kisi_sayisi=party,
            toplam_fiyat=round(paid, 2),
            kar=round(paid - tour.maliyet * party, 2),
        ))
        created += 1

    for i, customer in enumerate(rng.sample(customers, 60), start=1):
        db.add(SurveyResponse(
            anket_id=i,
            musteri_id=customer.musteri_id,
            oncelikli_ozellik=rng.choice(PRIORITY_ANSWERS),
            aktivite_tercihi=rng.choice(ACTIVITY_ANSWERS),
            kampanya_etkisi=rng.choice(IMPACT_ANSWERS),
            tatil_sikligi=rng.choice(FREQUENCY_ANSWERS),
        ))

    db.commit()
    logger.info(f"Seeded {len(tours)} tours, {len(campaigns)} campaigns, {created} reservations")
    return created
