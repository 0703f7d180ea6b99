"""Unit tests for the keyword classifiers."""
import pytest

from actiontrack.domains.nonconformity.classify import (
    SEVERITY_RULES,
    classify,
    classify_severity,
    classify_source,
    classify_status,
)
from actiontrack.domains.nonconformity.models import Severity, Source, Status


class TestDefaults:
    """Empty and unrecognized text falls back to the documented default."""

    @pytest.mark.parametrize("text", ["", None, "   ", "xyz"])
    def test_source_default(self, text):
        assert classify_source(text) == Source.PRODUCTIVITY

    @pytest.mark.parametrize("text", ["", None, "Orta", "medium"])
    def test_severity_default(self, text):
        assert classify_severity(text) == Severity.MEDIUM

    @pytest.mark.parametrize("text", ["", None, "Açık", "open"])
    def test_status_default(self, text):
        assert classify_status(text) == Status.OPEN

    def test_non_string_input(self):
        assert classify_source(42) == Source.PRODUCTIVITY
        assert classify_severity(3.5) == Severity.MEDIUM


class TestClassifySource:

    @pytest.mark.parametrize("text, expected", [
        ("Güvenlik Olayı", Source.SAFETY),
        ("SAFETY walk", Source.SAFETY),
        ("Müşteri Şikayeti", Source.CUSTOMER_SATISFACTION),
        ("Customer claim", Source.CUSTOMER_SATISFACTION),
        ("Verimlilik", Source.PRODUCTIVITY),
        ("Fire oranı", Source.FIRE_SCRAP),
        ("Scrap", Source.FIRE_SCRAP),
        ("Ekstra Navlun", Source.PREMIUM_FREIGHT),
        ("premium freight", Source.PREMIUM_FREIGHT),
    ])
    def test_keywords(self, text, expected):
        assert classify_source(text) == expected

    def test_first_rule_wins(self):
        assert classify_source("safety scrap") == Source.SAFETY
        assert classify_source("customer freight") == Source.CUSTOMER_SATISFACTION


class TestClassifySeverity:

    @pytest.mark.parametrize("text, expected", [
        ("Yüksek", Severity.HIGH),
        ("HIGH", Severity.HIGH),
        ("Kritik", Severity.HIGH),
        ("Düşük", Severity.LOW),
        ("low", Severity.LOW),
        ("az", Severity.LOW),
    ])
    def test_keywords(self, text, expected):
        assert classify_severity(text) == expected

    def test_high_checked_before_low(self):
        assert classify_severity("high / low") == Severity.HIGH
        assert classify_severity("düşük değil, yüksek") == Severity.HIGH


class TestClassifyStatus:

    @pytest.mark.parametrize("text, expected", [
        ("Kapalı", Status.CLOSED),
        ("closed", Status.CLOSED),
        ("Tamamlandı", Status.CLOSED),
        ("Devam ediyor", Status.IN_PROGRESS),
        ("In Progress", Status.IN_PROGRESS),
        ("Süren", Status.IN_PROGRESS),
    ])
    def test_keywords(self, text, expected):
        assert classify_status(text) == expected

    def test_closed_checked_before_progress(self):
        assert classify_status("closed, was in progress") == Status.CLOSED

    def test_accented_keywords_match_literally(self):
        # "KAPALI".lower() is "kapali", which lacks the dotless ı
        assert classify_status("KAPALI") == Status.OPEN


def test_custom_rule_table():
    rules = [(("urgent",), Severity.HIGH), *SEVERITY_RULES]
    assert classify("URGENT fix", rules, Severity.MEDIUM) == Severity.HIGH
    assert classify("nothing", rules, Severity.MEDIUM) == Severity.MEDIUM
