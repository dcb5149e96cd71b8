"""
Free-text survey answers -> scores and bands.

Survey answers arrive as numbers ("4"), Turkish phrases ("Çok etkiledi") or
English phrases ("slightly"). Each question has one ordered rule table;
the first rule that matches decides. Answers no rule matches are dropped.

Matching works on normalised text (Turkish letters folded to ASCII, lower
case, collapsed whitespace). Short words must match a whole token; stems
match anywhere, which covers Turkish suffixes (etkiledi, etkilemedim, ...).
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional, Pattern, Tuple
import re

_TURKISH_FOLD = str.maketrans({
    "İ": "i", "I": "i", "ı": "i",
    "Ş": "s", "ş": "s",
    "Ç": "c", "ç": "c",
    "Ğ": "g", "ğ": "g",
    "Ö": "o", "ö": "o",
    "Ü": "u", "ü": "u",
})

_NUMBER = re.compile(r"^\d+(?:[.,]\d+)?$")
_FIRST_INT = re.compile(r"\d+")
_FIRST_SCORE_DIGIT = re.compile(r"[0-5]")
_TOKEN = re.compile(r"[a-z0-9+']+")


def normalize_answer(raw: Any) -> str:
    if raw is None:
        return ""
    text = str(raw).translate(_TURKISH_FOLD).lower()
    return " ".join(text.split())


@dataclass(frozen=True)
class AnswerRule:
    """One row of a rule table. value is a score (int) or a band label (str)."""
    value: Any
    words: FrozenSet[str] = field(default_factory=frozenset)
    stems: Tuple[str, ...] = ()
    prefer_digit: bool = False
    pattern: Optional[Pattern] = None

    def matches(self, text: str, tokens: List[str]) -> bool:
        if any(token in self.words for token in tokens):
            return True
        if self.pattern is not None and self.pattern.search(text):
            return True
        return any(stem in text for stem in self.stems)


# Negative forms of etkile-/etkilen-: -medi, -mez, -mem, -meyecek, -miyor.
# "etkilemek" (infinitive) and "etkilemis" (has affected) stay positive.
_NEGATED_AFFECT = re.compile(r"etkilen?m(?:e[dzmy]|iyor)")

# Order matters: negations first, then "slightly" and "medium" ahead of "very"
# so that "cok az" (very little) scores 1, then the bare verb.
IMPACT_RULES: Tuple[AnswerRule, ...] = (
    AnswerRule(0, frozenset({"hic", "none", "yok"}),
               ("etkisi olmadi", "didn't affect", "didnt affect", "did not affect",
                "not affect", "no effect", "no impact", "not at all"),
               pattern=_NEGATED_AFFECT),
    AnswerRule(1, frozenset({"az", "biraz"}), ("slightly", "a little")),
    AnswerRule(3, frozenset({"orta", "medium"}), ("kararsiz", "undecided", "ortalama"), prefer_digit=True),
    AnswerRule(5, frozenset({"cok", "very"}), ("kesinlikle", "definitely", "oldukca"), prefer_digit=True),
    AnswerRule(4, frozenset(), ("etkiledi", "etkiler", "etkili", "etkilen", "etkilemis", "affected")),
)

FREQUENCY_RULES: Tuple[AnswerRule, ...] = (
    AnswerRule("4+", frozenset({"dort", "four"}), ("fazla", "more")),
    AnswerRule("3", frozenset({"uc", "three"})),
    AnswerRule("2", frozenset({"iki", "two", "twice"})),
    AnswerRule("1", frozenset({"bir", "one", "once"})),
)


def _first_match(rules: Tuple[AnswerRule, ...], text: str) -> Optional[AnswerRule]:
    tokens = _TOKEN.findall(text)
    for rule in rules:
        if rule.matches(text, tokens):
            return rule
    return None


def impact_score(raw: Any) -> Optional[int]:
    """
    0-5 campaign-impact score for an answer, or None when unparseable.

    A bare number is taken as-is (and dropped outside 0-5). Rules flagged
    prefer_digit use the first digit 0-5 in the answer when there is one.
    """
    text = normalize_answer(raw)
    if not text:
        return None
    if _NUMBER.match(text):
        score = int(float(text.replace(",", ".")))
        return score if 0 <= score <= 5 else None
    rule = _first_match(IMPACT_RULES, text)
    if rule is None:
        return None
    if rule.prefer_digit:
        digit = _FIRST_SCORE_DIGIT.search(text)
        if digit:
            return int(digit.group())
    return rule.value


def frequency_band(raw: Any) -> Optional[str]:
    """
    Vacations per year -> "1", "2", "3" or "4+".

    Any number in the answer wins over words; 4 and above clamp to "4+",
    zero is dropped.
    """
    text = normalize_answer(raw)
    if not text:
        return None
    number = _FIRST_INT.search(text)
    if number:
        count = int(number.group())
        if count < 1:
            return None
        return "4+" if count >= 4 else str(count)
    rule = _first_match(FREQUENCY_RULES, text)
    return rule.value if rule else None
