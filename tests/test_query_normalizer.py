import pytest

from skycast.exceptions.weather import InputError
from skycast.services.query_normalizer import KNOWN_ALIASES, QueryNormalizer


class TestQueryNormalizer:
    """Test cases for the QueryNormalizer class."""

    @pytest.mark.parametrize("raw", ["London", "  london", "LONDON  ", "\tLoNdOn\n"])
    def test_whitespace_and_case_variants_share_a_key(self, raw):
        assert QueryNormalizer().normalize(raw) == "london"

    def test_normalize_is_idempotent(self):
        normalizer = QueryNormalizer()
        once = normalizer.normalize("  New York ")
        assert normalizer.normalize(once) == once == "new york"

    @pytest.mark.parametrize("raw", ["Banglore", " banglore ", "BANGLORE"])
    def test_known_misspelling_is_corrected(self, raw):
        assert QueryNormalizer().normalize(raw) == "bangalore"

    @pytest.mark.parametrize("raw", ["bangalore", "banglore city", "bengaluru", "12.97,77.59"])
    def test_alias_table_leaves_other_inputs_alone(self, raw):
        assert QueryNormalizer().normalize(raw) == raw

    @pytest.mark.parametrize("raw", ["", "   ", "\n\t", None])
    def test_empty_input_is_rejected(self, raw):
        with pytest.raises(InputError):
            QueryNormalizer().normalize(raw)

    def test_default_alias_table(self):
        assert KNOWN_ALIASES == {"banglore": "bangalore"}

    def test_custom_alias_table(self):
        normalizer = QueryNormalizer(aliases={"nyc": "new york"})
        assert normalizer.normalize("NYC") == "new york"
        assert normalizer.normalize("banglore") == "banglore"
