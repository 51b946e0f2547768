import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from receiptsieve.utils.money import parse_money, format_money
from decimal import Decimal


class TestParseMoney:

    def test_currency_prefix_and_separators(self):
        assert parse_money("$1,234.56") == Decimal('1234.56')

    def test_quantized_to_cents(self):
        assert str(parse_money("10")) == '10.00'
        assert str(parse_money("$ 52.3")) == '52.30'

    def test_non_positive_rejected(self):
        assert parse_money("0.00") is None
        assert parse_money("-5.00") is None

    def test_garbage_rejected(self):
        assert parse_money("abc") is None
        assert parse_money("") is None
        assert parse_money(None) is None

    def test_absurd_amount_rejected(self):
        assert parse_money("99999999.00") is None


class TestFormatMoney:

    def test_format(self):
        assert format_money(Decimal('52.3')) == '$52.30'

    def test_missing(self):
        assert format_money(None) == 'N/A'
