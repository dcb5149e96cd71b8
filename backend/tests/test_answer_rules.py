"""
Free-text survey answer rules.

The same rule tables back every report that reads campaign-impact or
vacation-frequency answers, so these cases pin down their behaviour.
"""

import pytest

from smartour.services.answer_rules import (
    frequency_band,
    impact_score,
    normalize_answer,
)


class TestNormalize:

    def test_turkish_letters_fold_to_ascii(self):
        assert normalize_answer("  ÇOK   Etkiledİ ") == "cok etkiledi"
        assert normalize_answer("Kararsızım") == "kararsizim"
        assert normalize_answer("Üç") == "uc"

    def test_none(self):
        assert normalize_answer(None) == ""


class TestImpactScore:

    @pytest.mark.parametrize("answer, score", [
        ("0", 0),
        ("3", 3),
        ("5", 5),
        ("Hiç etkilemedi", 0),
        ("Etkilemedi", 0),
        ("didn't affect me", 0),
        ("Biraz etkiledi", 1),
        ("Çok az etkiledi", 1),
        ("slightly", 1),
        ("Orta", 3),
        ("Orta (2)", 2),
        ("Kararsızım", 3),
        ("Etkiledi", 4),
        ("affected", 4),
        ("Çok etkiledi", 5),
        ("Kesinlikle etkiledi", 5),
        ("Çok etkiledi, 4 veririm", 4),
        ("very much", 5),
    ])
    def test_known_answers(self, answer, score):
        assert impact_score(answer) == score

    @pytest.mark.parametrize("answer", [None, "", "   ", "7", "bilmiyorum", "???"])
    def test_unparseable_answers_are_dropped(self, answer):
        assert impact_score(answer) is None

    @pytest.mark.parametrize("answer", [
        "Etkilenmedim",
        "Kampanyalardan etkilenmiyorum",
        "Etkilenmez",
        "Etkilemiyor",
        "Beni etkilemeyecek",
        "Etkilenmem",
        "Etkisi yok",
        "Etkisi olmadı",
        "did not affect my choice",
        "no effect",
    ])
    def test_negation_wins_over_affected(self, answer):
        # negated forms contain the "etkilen" / "etkile" stems of the affected rule
        assert impact_score(answer) == 0

    @pytest.mark.parametrize("answer", ["Etkilendim", "Etkilemiş", "Kampanyalar beni etkiler"])
    def test_positive_forms_are_affected(self, answer):
        assert impact_score(answer) == 4

    @pytest.mark.parametrize("answer", ["not sure", "no idea", "No"])
    def test_bare_not_or_no_is_unparseable(self, answer):
        assert impact_score(answer) is None

    @pytest.mark.parametrize("answer, score", [
        ("Çok az etkiledi", 1),
        ("Çok az", 1),
        ("Kesinlikle biraz", 1),
        ("Orta, çok değil", 3),
        ("Çok fazla etkiledi", 5),
    ])
    def test_two_qualifiers_take_the_earlier_rule(self, answer, score):
        """slightly and medium are checked before very."""
        assert impact_score(answer) == score


class TestFrequencyBand:

    @pytest.mark.parametrize("answer, band", [
        ("1", "1"),
        ("2", "2"),
        ("3", "3"),
        ("4", "4+"),
        ("12", "4+"),
        ("4+", "4+"),
        ("Yılda iki kez", "2"),
        ("Bir", "1"),
        ("Üç", "3"),
        ("Dört veya daha fazla", "4+"),
        ("four or more", "4+"),
        ("two", "2"),
        ("Yılda 2 kez", "2"),
    ])
    def test_known_answers(self, answer, band):
        assert frequency_band(answer) == band

    @pytest.mark.parametrize("answer", [None, "", "0", "hiç", "bazen"])
    def test_unparseable_answers_are_dropped(self, answer):
        assert frequency_band(answer) is None
