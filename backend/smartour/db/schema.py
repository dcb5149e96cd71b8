"""
Schema probing for optional survey columns.

Survey questions were added to anket_musteri at different times and under
different names. Each logical field lists the physical column names it may
live under, in order of preference; the first one present wins.
"""

from typing import Dict, Iterable, Optional, Tuple
import logging

from sqlalchemy import inspect
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

SURVEY_TABLE = "anket_musteri"

COLUMN_CANDIDATES: Dict[str, Tuple[str, ...]] = {
    "priority_feature": ("oncelikli_ozellik", "en_onemli_ozellik", "oncelik"),
    "activity_preference": ("aktivite_tercihi", "tercih_edilen_aktivite", "aktivite"),
    "campaign_impact": ("kampanya_etkisi", "kampanya_etki", "kampanya_etki_puani"),
    "vacation_frequency": ("tatil_sikligi", "yillik_tatil_sayisi", "tatil_sayisi"),
}


def table_columns(db: Session, table: str) -> set:
    """Physical column names of a table, lower-cased. Empty if the table is missing."""
    inspector = inspect(db.connection())
    if not inspector.has_table(table):
        logger.warning(f"Table {table} not found during schema probe")
        return set()
    return {col["name"].lower() for col in inspector.get_columns(table)}


def resolve_columns(
    db: Session,
    fields: Iterable[str],
    table: str = SURVEY_TABLE,
) -> Dict[str, Optional[str]]:
    """
    Map each logical field to the first candidate column that exists,
    or None when no candidate is present.
    """
    present = table_columns(db, table)
    resolved: Dict[str, Optional[str]] = {}
    for field in fields:
        resolved[field] = next(
            (name for name in COLUMN_CANDIDATES[field] if name in present),
            None,
        )
        if resolved[field] is None:
            logger.warning(f"No column for {field} in {table} (tried {COLUMN_CANDIDATES[field]})")
    return resolved
