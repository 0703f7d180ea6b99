"""Pytest configuration and fixtures."""
import io
from datetime import datetime
from itertools import count

import pytest
from openpyxl import Workbook

from actiontrack.domains.nonconformity.models import NonConformity


@pytest.fixture
def make_record():
    """Factory for records with sensible defaults; keyword args override fields."""
    ids = count(1)

    def _make(**fields) -> NonConformity:
        created = fields.pop("created_at", "2024-09-01T00:00:00")
        fields.setdefault("id", f"nc-test-{next(ids)}")
        fields.setdefault("description", "Makine koruma sisteminde arıza")
        return NonConformity(created_at=created, created_date=created, **fields)

    return _make


@pytest.fixture
def build_workbook():
    """Build an .xlsx payload from a list of rows; the first row is the header."""

    def _build(rows: list[list]) -> bytes:
        wb = Workbook()
        ws = wb.active
        for row in rows:
            ws.append(row)
        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    return _build


@pytest.fixture
def import_time() -> datetime:
    return datetime(2024, 9, 20, 9, 30)


@pytest.fixture
def sample_rows() -> list[list]:
    """A small export as the safety and quality teams fill it in."""
    return [
        ["Açıklama", "Kaynak", "Önem", "Durum", "Gün", "Oluşturma", "Aksiyon",
         "Ekip Lideri", "Ekip", "Kategori", "Hedef Tarih", "Kapanış"],
        ["Makine koruma sisteminde arıza", "Güvenlik Olayı", "Yüksek", "", 16,
         datetime(2024, 9, 2), "Koruma değişimi", "Ayşe Yılmaz", "Bakım",
         "is-guvenligi", datetime(2024, 9, 25), None],
        ["Müşteri iadesi - boya hatası", "Müşteri Şikayeti", "Orta", "Kapalı", "3",
         datetime(2024, 9, 3), "Boya prosesi revizyonu", "Mehmet Kaya", "Kalite",
         "kalite-iyilestirme", datetime(2024, 9, 25), datetime(2024, 9, 20)],
        ["", "Fire", "Düşük", "Açık", 5, None, None, None, None, None, None, None],
        ["Hat 2 verim kaybı", "Verimlilik", "low", "Devam ediyor", None,
         "not a date", None, None, None, None, None, None],
        ["Açıklama yok", "Navlun", "", "", 1, None, None, None, None, None, None, None],
    ]


@pytest.fixture
def sample_mapping() -> dict[str, str]:
    return {
        "description": "Açıklama",
        "source": "Kaynak",
        "severity": "Önem",
        "status": "Durum",
        "day": "Gün",
        "created_date": "Oluşturma",
        "action_title": "Aksiyon",
        "team_leader": "Ekip Lideri",
        "team": "Ekip",
        "category": "Kategori",
        "target_date": "Hedef Tarih",
        "closed_date": "Kapanış",
    }
