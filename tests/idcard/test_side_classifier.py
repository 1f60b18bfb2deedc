"""Unit tests for front/back side classification."""

import re

import pytest

from src.idcard.config_loader import ClassifierConfig
from src.idcard.constants import BACK_INDICATORS, FRONT_INDICATORS, IndicatorRule
from src.idcard.side_classifier import SideClassifier, classify_side
from src.idcard.types import SideLabel


@pytest.fixture
def classifier():
    """Provide classifier with default configuration."""
    return SideClassifier(ClassifierConfig())


class TestIndicatorTables:
    """Test indicator tables are immutable constants."""

    def test_tables_are_tuples(self):
        """Test tables cannot be appended to."""
        assert isinstance(FRONT_INDICATORS, tuple)
        assert isinstance(BACK_INDICATORS, tuple)

    def test_rules_are_frozen(self):
        """Test individual rules cannot be re-weighted at runtime."""
        rule = FRONT_INDICATORS[0]

        with pytest.raises(AttributeError):
            rule.weight = 100


class TestScoring:
    """Test score computation."""

    def test_front_score_breakdown(self, classifier, front_transcript):
        """Test front transcript matches the expected rules."""
        score = classifier.score(front_transcript)

        assert score.front_score == 9
        assert score.back_score == 0
        assert score.front_matches == ["government_header", "grouped_id_number", "dob_label", "gender"]

    def test_back_score_breakdown(self, classifier, back_transcript):
        """Test back transcript outweighs its printed ID number."""
        score = classifier.score(back_transcript)

        assert score.front_matches == ["grouped_id_number"]
        assert score.back_score > score.front_score
        assert "uidai_header" in score.back_matches
        assert "address_label" in score.back_matches

    def test_grouped_number_matches_digit_view(self, classifier):
        """Test a number with misread separators still counts as grouped."""
        score = classifier.score("2360-1234-5677")

        assert score.front_matches == ["grouped_id_number"]

    def test_empty_transcript(self, classifier):
        """Test empty text scores zero on both sides."""
        score = classifier.score("")

        assert (score.front_score, score.back_score) == (0, 0)


class TestClassify:
    """Test classification decisions."""

    def test_front(self):
        """Test header, grouped number, DOB and gender classify as front."""
        text = "Government of India\n2360 1234 5677\nDOB: 01/01/1990\nMALE"

        assert classify_side(text) == SideLabel.FRONT

    def test_back(self):
        """Test website token and address label classify as back."""
        text = "www.uidai.gov.in\nAddress: 123 Main St"

        assert classify_side(text) == SideLabel.BACK

    def test_fixture_sides(self, classifier, front_transcript, back_transcript):
        """Test the shared fixtures classify as their declared sides."""
        assert classifier.classify(front_transcript) == SideLabel.FRONT
        assert classifier.classify(back_transcript) == SideLabel.BACK

    def test_deterministic(self, classifier, front_transcript):
        """Test identical transcripts give identical labels."""
        labels = {classifier.classify(front_transcript) for _ in range(5)}

        assert labels == {SideLabel.FRONT}

    def test_below_threshold_is_unknown(self, classifier):
        """Test a lone weak indicator is not enough."""
        assert classifier.classify("MALE") == SideLabel.UNKNOWN

    def test_no_indicators_is_unknown(self, classifier):
        """Test text without indicators."""
        assert classifier.classify("hello world") == SideLabel.UNKNOWN
        assert classifier.classify("") == SideLabel.UNKNOWN

    def test_tie_with_contact_token_is_back(self, classifier):
        """Test an exact tie with a website token resolves to back."""
        text = "www.uidai.gov.in\nMALE"

        score = classifier.score(text)
        assert score.front_score == score.back_score
        assert classifier.classify(text) == SideLabel.BACK

    def test_tie_with_number_and_birth_token_is_front(self, classifier):
        """Test an exact tie with grouped number and birth token resolves to front."""
        text = "2360 1234 5677\nbirth\naddress"

        score = classifier.score(text)
        assert score.front_score == score.back_score
        assert classifier.classify(text) == SideLabel.FRONT

    def test_tie_without_tiebreak_token_is_unknown(self, classifier):
        """Test a tie with neither tie-break condition."""
        text = "2360 1234 5677\naddress"

        assert classifier.classify(text) == SideLabel.UNKNOWN

    def test_custom_threshold(self, front_transcript):
        """Test the minimum score is configurable."""
        strict = SideClassifier(ClassifierConfig(min_score=10))

        assert strict.classify(front_transcript) == SideLabel.UNKNOWN

    def test_custom_rules(self):
        """Test indicator tables can be replaced."""
        classifier = SideClassifier(
            ClassifierConfig(),
            front_rules=(IndicatorRule("photo", re.compile(r"photo"), 5),),
            back_rules=(),
        )

        assert classifier.classify("PHOTO") == SideLabel.FRONT


class TestContactToken:
    """Test the helpline number only counts as a contact token in context."""

    @pytest.mark.parametrize("year", ["1995", "1947"])
    def test_birth_year_does_not_change_side(self, classifier, year):
        """Test a front classifies the same whatever the birth year."""
        text = f"Government of India\nDOB: 01/01/{year}\nS/O Ramesh Kumar, Bengaluru 560038"

        score = classifier.score(text)

        assert "contact" not in score.back_matches
        assert (score.front_score, score.back_score) == (4, 2)
        assert classifier.classify(text) == SideLabel.FRONT

    @pytest.mark.parametrize("text", ["Call 1947", "Toll free: 1947", "Helpline - 1947"])
    def test_helpline_number_is_contact(self, classifier, text):
        """Test 1947 after a call label is a contact token."""
        assert "contact" in classifier.score(text).back_matches
