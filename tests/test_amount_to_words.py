from decimal import Decimal

import pytest

from invoicing.core.exceptions import ValidationError
from invoicing.services.amount_to_words import amount_to_words, format_invoice_amount


@pytest.mark.parametrize("amount, expected", [
    (0, "Zéro Dirhams (TTC)"),
    (1, "Un Dirhams (TTC)"),
    (10, "Dix Dirhams (TTC)"),
    (17, "Dix-Sept Dirhams (TTC)"),
    (20, "Vingt Dirhams (TTC)"),
    (21, "Vingt et Un Dirhams (TTC)"),
    (22, "Vingt-Deux Dirhams (TTC)"),
    (31, "Trente et Un Dirhams (TTC)"),
    (45, "Quarante-Cinq Dirhams (TTC)"),
    (61, "Soixante et Un Dirhams (TTC)"),
    (70, "Soixante-Dix Dirhams (TTC)"),
    (71, "Soixante et Onze Dirhams (TTC)"),
    (72, "Soixante-Douze Dirhams (TTC)"),
    (77, "Soixante-Dix-Sept Dirhams (TTC)"),
    (80, "Quatre-Vingt Dirhams (TTC)"),
    (81, "Quatre-Vingt-Un Dirhams (TTC)"),
    (90, "Quatre-Vingt-Dix Dirhams (TTC)"),
    (91, "Quatre-Vingt-Onze Dirhams (TTC)"),
    (99, "Quatre-Vingt-Dix-Neuf Dirhams (TTC)"),
    (100, "Cent Dirhams (TTC)"),
    (101, "Cent Un Dirhams (TTC)"),
    (200, "Deux Cents Dirhams (TTC)"),
    (201, "Deux Cent Un Dirhams (TTC)"),
    (280, "Deux Cent Quatre-Vingt Dirhams (TTC)"),
    (1000, "Mille Dirhams (TTC)"),
    (1200, "Mille Deux Cent Dirhams (TTC)"),
    (1999, "Mille Neuf Cent Quatre-Vingt-Dix-Neuf Dirhams (TTC)"),
    (2000, "Deux Mille Dirhams (TTC)"),
    (7200, "Sept Mille Deux Cent Dirhams (TTC)"),
    (50500, "Cinquante Mille Cinq Cent Dirhams (TTC)"),
    (100000, "Cent Mille Dirhams (TTC)"),
    (200000, "Deux Cent Mille Dirhams (TTC)"),
    (999999, "Neuf Cent Quatre-Vingt-Dix-Neuf Mille Neuf Cent Quatre-Vingt-Dix-Neuf Dirhams (TTC)"),
])
def test_amount_to_words(amount, expected):
    assert amount_to_words(amount) == expected


@pytest.mark.parametrize("amount, expected", [
    (7200.50, "Sept Mille Deux Cent Un Dirhams (TTC)"),
    (7200.49, "Sept Mille Deux Cent Dirhams (TTC)"),
    (Decimal("99.5"), "Cent Dirhams (TTC)"),
    (0.4, "Zéro Dirhams (TTC)"),
    ("1200", "Mille Deux Cent Dirhams (TTC)"),
])
def test_decimals_round_half_up(amount, expected):
    assert amount_to_words(amount) == expected


def test_negative_amounts_are_prefixed():
    assert amount_to_words(-1500) == "Moins Mille Cinq Cent Dirhams (TTC)"
    for n in list(range(1, 1000, 37)) + [1000, 7200, 999999]:
        assert amount_to_words(-n) == f"Moins {amount_to_words(n)}"


def test_currency_label():
    assert amount_to_words(200, "Euros") == "Deux Cents Euros (TTC)"
    assert amount_to_words(0, "Euros") == "Zéro Euros (TTC)"


@pytest.mark.parametrize("amount", [1_000_000, 1_500_000, 999_999.5, -1_000_000])
def test_amounts_above_maximum_are_rejected(amount):
    with pytest.raises(ValidationError) as exc_info:
        amount_to_words(amount)
    assert exc_info.value.message == "Amount exceeds maximum supported value (999,999)"


@pytest.mark.parametrize("amount", ["abc", None, float("nan"), float("inf")])
def test_non_numeric_amounts_are_rejected(amount):
    with pytest.raises(ValidationError):
        amount_to_words(amount)


def test_format_invoice_amount_uses_configured_label():
    assert format_invoice_amount(7200) == "Sept Mille Deux Cent Dirhams (TTC)"
