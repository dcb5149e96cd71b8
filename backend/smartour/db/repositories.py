"""
Repository pattern for data access.
Every method runs one aggregate query against the reporting store; shaping
the numbers into reports happens in smartour.services.
"""

from datetime import date
from typing import Any, List, Optional, Tuple
import logging

from sqlalchemy import case, distinct, extract, func, literal_column, text
from sqlalchemy.orm import Session, aliased

from smartour.db.models import Campaign, Customer, Reservation, SurveyResponse, Tour
from smartour.db.schema import SURVEY_TABLE

logger = logging.getLogger(__name__)


def _campaign_flag():
    """1 for campaign-attached reservations, 0 otherwise."""
    return case(
        (Reservation.kampanya_id.isnot(None), literal_column("1")),
        else_=literal_column("0"),
    )


class TourRepository:
    """Tour-level queries (turlar)."""

    def __init__(self, db: Session):
        self.db = db

    def count(self) -> int:
        return self.db.query(func.count(Tour.tur_id)).scalar()

    def get(self, tur_id: int) -> Optional[Tour]:
        return self.db.query(Tour).filter(Tour.tur_id == tur_id).first()

    def at_or_below_occupancy(self, threshold: float) -> List[Any]:
        """Tours with doluluk_orani <= threshold, emptiest first."""
        return (
            self.db.query(Tour.tur_id, Tour.tur_adi, Tour.doluluk_orani)
            .filter(Tour.doluluk_orani <= threshold)
            .order_by(Tour.doluluk_orani.asc(), Tour.tur_id.asc())
            .all()
        )

    def lowest_occupancy(self) -> Optional[Any]:
        return (
            self.db.query(Tour.tur_id, Tour.tur_adi, Tour.doluluk_orani)
            .filter(Tour.doluluk_orani.isnot(None))
            .order_by(Tour.doluluk_orani.asc(), Tour.tur_id.asc())
            .first()
        )

    def count_by_type(self) -> List[Tuple[str, int]]:
        return (
            self.db.query(Tour.tur_turu, func.count(Tour.tur_id).label("toplam"))
            .group_by(Tour.tur_turu)
            .order_by(Tour.tur_turu.asc())
            .all()
        )

    def average_occupancy_by_type(self) -> List[Tuple[str, Any]]:
        return (
            self.db.query(Tour.tur_turu, func.avg(Tour.doluluk_orani).label("avg_occupancy"))
            .filter(Tour.tur_turu.isnot(None))
            .group_by(Tour.tur_turu)
            .all()
        )


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def count(self) -> int:
        return self.db.query(func.count(Customer.musteri_id)).scalar()


class ReservationRepository:
    """Reservation aggregates (rezervasyon joined with turlar / musteriler)."""

    def __init__(self, db: Session):
        self.db = db

    def _in_window(self, query, start: Optional[date], end: Optional[date] = None):
        if start is not None:
            query = query.filter(Reservation.rezervasyon_tarihi >= start)
        if end is not None:
            query = query.filter(Reservation.rezervasyon_tarihi < end)
        return query

    def count(self) -> int:
        return self.db.query(func.count(Reservation.rezervasyon_id)).scalar()

    def profit_since(self, start: date) -> Any:
        return (
            self.db.query(func.coalesce(func.sum(Reservation.kar), 0))
            .filter(Reservation.rezervasyon_tarihi >= start)
            .scalar()
        )

    def window_summary(self, start: date, end: Optional[date] = None) -> Tuple[Any, Any, Any]:
        """(reservation count, profit sum, campaign-attached count) for a window."""
        query = self.db.query(
            func.count(Reservation.rezervasyon_id),
            func.coalesce(func.sum(Reservation.kar), 0),
            func.coalesce(func.sum(_campaign_flag()), 0),
        )
        return tuple(self._in_window(query, start, end).one())

    def campaign_summary(self) -> Tuple[Any, Any, Any]:
        """(all reservations, campaign reservations, campaign profit)."""
        return tuple(
            self.db.query(
                func.count(Reservation.rezervasyon_id),
                func.coalesce(func.sum(_campaign_flag()), 0),
                func.coalesce(
                    func.sum(case((Reservation.kampanya_id.isnot(None), Reservation.kar), else_=0)), 0
                ),
            ).one()
        )

    def low_occupancy_campaign_tours(self, threshold: float) -> int:
        return (
            self.db.query(func.count(distinct(Reservation.tur_id)))
            .join(Tour, Tour.tur_id == Reservation.tur_id)
            .filter(Reservation.kampanya_id.isnot(None), Tour.doluluk_orani < threshold)
            .scalar()
        )

    def most_profitable_tour(self, start: date) -> Optional[Any]:
        total = func.sum(Reservation.kar).label("total_profit")
        return (
            self.db.query(Tour.tur_id, Tour.tur_adi, total)
            .join(Reservation, Reservation.tur_id == Tour.tur_id)
            .filter(Reservation.rezervasyon_tarihi >= start)
            .group_by(Tour.tur_id, Tour.tur_adi)
            .order_by(total.desc(), Tour.tur_id.asc())
            .first()
        )

    def lowest_occupancy_booked_tour(self, start: date) -> Optional[Any]:
        """Emptiest tour among tours booked since start."""
        occupancy = func.avg(Tour.doluluk_orani).label("doluluk_orani")
        return (
            self.db.query(Tour.tur_id, Tour.tur_adi, occupancy)
            .join(Reservation, Reservation.tur_id == Tour.tur_id)
            .filter(Reservation.rezervasyon_tarihi >= start, Tour.doluluk_orani.isnot(None))
            .group_by(Tour.tur_id, Tour.tur_adi)
            .order_by(occupancy.asc(), Tour.tur_id.asc())
            .first()
        )

    def counts_by_tour_type(self) -> List[Tuple[str, int]]:
        return (
            self.db.query(Tour.tur_turu, func.count(Reservation.rezervasyon_id))
            .join(Tour, Tour.tur_id == Reservation.tur_id)
            .filter(Tour.tur_turu.isnot(None))
            .group_by(Tour.tur_turu)
            .all()
        )

    def counts_by_tour_day(self, start: Optional[date] = None) -> List[Tuple[int, Any, date, int]]:
        """(tur_id, sure_gun, date, count) for tours with a known duration."""
        query = (
            self.db.query(
                Reservation.tur_id,
                Tour.sure_gun,
                Reservation.rezervasyon_tarihi,
                func.count(Reservation.rezervasyon_id),
            )
            .join(Tour, Tour.tur_id == Reservation.tur_id)
            .filter(Tour.sure_gun.isnot(None), Reservation.rezervasyon_tarihi.isnot(None))
        )
        query = self._in_window(query, start)
        return query.group_by(Reservation.tur_id, Tour.sure_gun, Reservation.rezervasyon_tarihi).all()

    def monthly_counts_by_type(self, start: date) -> List[Tuple[int, int, str, int]]:
        year = extract("year", Reservation.rezervasyon_tarihi)
        month = extract("month", Reservation.rezervasyon_tarihi)
        return (
            self.db.query(year, month, Tour.tur_turu, func.count(Reservation.rezervasyon_id))
            .join(Tour, Tour.tur_id == Reservation.tur_id)
            .filter(Reservation.rezervasyon_tarihi >= start, Tour.tur_turu.isnot(None))
            .group_by(year, month, Tour.tur_turu)
            .all()
        )

    def tour_totals(self, tur_id: int) -> Tuple[Any, Any]:
        """(reservation count, profit sum) for one tour."""
        return tuple(
            self.db.query(
                func.count(Reservation.rezervasyon_id),
                func.coalesce(func.sum(Reservation.kar), 0),
            )
            .filter(Reservation.tur_id == tur_id)
            .one()
        )

    def split_by_campaign(self) -> List[Tuple[int, int, Any, Any, Any]]:
        """
        Per campaign flag (1 attached, 0 not): count, avg profit, total profit,
        avg tour occupancy.
        """
        flag = _campaign_flag()
        return (
            self.db.query(
                flag,
                func.count(Reservation.rezervasyon_id),
                func.avg(Reservation.kar),
                func.sum(Reservation.kar),
                func.avg(Tour.doluluk_orani),
            )
            .outerjoin(Tour, Tour.tur_id == Reservation.tur_id)
            .group_by(flag)
            .all()
        )

    def counts_by_age_and_type(self) -> List[Tuple[Any, str, int]]:
        return (
            self.db.query(Customer.yas, Tour.tur_turu, func.count(Reservation.rezervasyon_id))
            .join(Customer, Customer.musteri_id == Reservation.musteri_id)
            .join(Tour, Tour.tur_id == Reservation.tur_id)
            .filter(Customer.yas.isnot(None), Tour.tur_turu.isnot(None))
            .group_by(Customer.yas, Tour.tur_turu)
            .all()
        )

    def counts_by_age_and_campaign(self) -> List[Tuple[Any, int, int]]:
        flag = _campaign_flag()
        return (
            self.db.query(Customer.yas, flag, func.count(Reservation.rezervasyon_id))
            .join(Customer, Customer.musteri_id == Reservation.musteri_id)
            .filter(Customer.yas.isnot(None))
            .group_by(Customer.yas, flag)
            .all()
        )


class CampaignRepository:
    """Campaign-centric aggregates (kampanyalar joined with rezervasyon / turlar)."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Campaign]:
        return self.db.query(Campaign).order_by(Campaign.kampanya_id.asc()).all()

    def get(self, kampanya_id: int) -> Optional[Campaign]:
        return self.db.query(Campaign).filter(Campaign.kampanya_id == kampanya_id).first()

    def profit_and_discount(self) -> List[Tuple[int, str, Any, Any, Any]]:
        """
        Per campaign: discount rate, profit sum and granted discount amount
        (list price * party size * rate / 100). Campaigns without bookings
        come back with null sums.
        """
        party = func.coalesce(Reservation.kisi_sayisi, 1)
        discount_amount = func.sum(Tour.fiyat * party * Campaign.indirim_orani / 100)
        return (
            self.db.query(
                Campaign.kampanya_id,
                Campaign.kampanya_adi,
                Campaign.indirim_orani,
                func.sum(Reservation.kar),
                discount_amount,
            )
            .outerjoin(Reservation, Reservation.kampanya_id == Campaign.kampanya_id)
            .outerjoin(Tour, Tour.tur_id == Reservation.tur_id)
            .group_by(Campaign.kampanya_id, Campaign.kampanya_adi, Campaign.indirim_orani)
            .all()
        )

    def occupancy_around_campaigns(self) -> List[Any]:
        """
        One row per (campaign, tour booked under it) with the tour's capacity and
        its reservation counts strictly before the campaign start and strictly
        after the campaign end.
        """
        pairs = (
            self.db.query(Reservation.kampanya_id, Reservation.tur_id)
            .filter(Reservation.kampanya_id.isnot(None))
            .distinct()
            .subquery()
        )
        other = aliased(Reservation)
        before = func.coalesce(
            func.sum(case((other.rezervasyon_tarihi < Campaign.baslangic_tarihi, 1), else_=0)), 0
        )
        after = func.coalesce(
            func.sum(case((other.rezervasyon_tarihi > Campaign.bitis_tarihi, 1), else_=0)), 0
        )
        return (
            self.db.query(
                Campaign.kampanya_id,
                Campaign.kampanya_adi,
                Tour.tur_id,
                Tour.tur_adi,
                Tour.kapasite,
                before.label("before_count"),
                after.label("after_count"),
            )
            .select_from(pairs)
            .join(Campaign, Campaign.kampanya_id == pairs.c.kampanya_id)
            .join(Tour, Tour.tur_id == pairs.c.tur_id)
            .outerjoin(other, other.tur_id == Tour.tur_id)
            .group_by(
                Campaign.kampanya_id, Campaign.kampanya_adi,
                Tour.tur_id, Tour.tur_adi, Tour.kapasite,
            )
            .all()
        )

    def reservations_for_simulation(self, kampanya_id: int) -> List[Tuple[Any, Any, Any, Any]]:
        """(list price, cost, party size, stored profit) per reservation of a campaign."""
        return (
            self.db.query(Tour.fiyat, Tour.maliyet, Reservation.kisi_sayisi, Reservation.kar)
            .join(Tour, Tour.tur_id == Reservation.tur_id)
            .filter(Reservation.kampanya_id == kampanya_id)
            .all()
        )

    def matrix_cells(self, aggregate) -> List[Tuple[int, str, str, Any]]:
        """(campaign id, campaign name, tour type, aggregate) for every populated cell."""
        return (
            self.db.query(Campaign.kampanya_id, Campaign.kampanya_adi, Tour.tur_turu, aggregate)
            .join(Reservation, Reservation.kampanya_id == Campaign.kampanya_id)
            .join(Tour, Tour.tur_id == Reservation.tur_id)
            .filter(Tour.tur_turu.isnot(None))
            .group_by(Campaign.kampanya_id, Campaign.kampanya_adi, Tour.tur_turu)
            .all()
        )


MATRIX_AGGREGATES = {
    "avg_profit": lambda: func.avg(Reservation.kar),
    "total_profit": lambda: func.sum(Reservation.kar),
    "reservation_count": lambda: func.count(Reservation.rezervasyon_id),
    "avg_occupancy": lambda: func.avg(Tour.doluluk_orani),
}


class SurveyRepository:
    """Survey queries (anket_musteri). Answer columns come from schema probing."""

    def __init__(self, db: Session):
        self.db = db

    def participant_count(self) -> int:
        return self.db.query(func.count(distinct(SurveyResponse.musteri_id))).scalar()

    def participants_by_age(self) -> List[Tuple[Any, int]]:
        return (
            self.db.query(Customer.yas, func.count(distinct(SurveyResponse.musteri_id)))
            .join(Customer, Customer.musteri_id == SurveyResponse.musteri_id)
            .filter(Customer.yas.isnot(None))
            .group_by(Customer.yas)
            .all()
        )

    def answer_counts(self, column: str, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        """
        Trimmed non-empty answers of a column with their counts, most common first.
        column must come from schema.resolve_columns, never from user input.
        """
        col = self.db.get_bind().dialect.identifier_preparer.quote(column)
        sql = (
            f"SELECT TRIM({col}) AS answer, COUNT(*) AS total "
            f"FROM {SURVEY_TABLE} "
            f"WHERE {col} IS NOT NULL AND TRIM({col}) <> '' "
            f"GROUP BY TRIM({col}) "
            f"ORDER BY total DESC, answer ASC"
        )
        params = {}
        if limit is not None:
            sql += " LIMIT :limit"
            params["limit"] = limit
        rows = self.db.execute(text(sql), params).fetchall()
        return [(row[0], row[1]) for row in rows]
