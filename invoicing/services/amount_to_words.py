"""
Amount To Words - French spelling of invoice totals

Example: 7200 -> "Sept Mille Deux Cent Dirhams (TTC)"
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_FLOOR

from invoicing.core.config import settings
from invoicing.core.exceptions import ValidationError


MAX_AMOUNT = 999_999

UNITS = ["", "Un", "Deux", "Trois", "Quatre", "Cinq", "Six", "Sept", "Huit", "Neuf"]
TEENS = [
    "Dix", "Onze", "Douze", "Treize", "Quatorze",
    "Quinze", "Seize", "Dix-Sept", "Dix-Huit", "Dix-Neuf",
]
TENS = ["", "", "Vingt", "Trente", "Quarante", "Cinquante", "Soixante"]

# "Deux Cent" alone becomes "Deux Cents"; "Mille Deux Cent" and "Deux Cent Un" do not
_STANDALONE_CENT = re.compile(r"^(Deux|Trois|Quatre|Cinq|Six|Sept|Huit|Neuf) Cent$")


def _two_digits(n: int) -> str:
    """0-99"""
    if n == 0:
        return ""
    if n < 10:
        return UNITS[n]
    if n < 20:
        return TEENS[n - 10]

    tens, units = divmod(n, 10)

    # 70-79: Soixante-Dix, Soixante et Onze, Soixante-Douze...
    if tens == 7:
        if units == 1:
            return "Soixante et Onze"
        return f"Soixante-{TEENS[units]}"

    # 80-89: no plural "s" on Vingt
    if tens == 8:
        if units == 0:
            return "Quatre-Vingt"
        return f"Quatre-Vingt-{UNITS[units]}"

    # 90-99: Quatre-Vingt-Dix, Quatre-Vingt-Onze...
    if tens == 9:
        return f"Quatre-Vingt-{TEENS[units]}"

    if units == 0:
        return TENS[tens]
    if units == 1:
        return f"{TENS[tens]} et Un"
    return f"{TENS[tens]}-{UNITS[units]}"


def _three_digits(n: int) -> str:
    """0-999. Never pluralizes Cent."""
    hundreds, remainder = divmod(n, 100)
    parts = []
    if hundreds == 1:
        parts.append("Cent")
    elif hundreds > 1:
        parts.append(f"{UNITS[hundreds]} Cent")
    if remainder:
        parts.append(_two_digits(remainder))
    return " ".join(parts)


def _round_to_units(amount) -> int:
    """Round half up to the nearest integer (7200.5 -> 7201)"""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Amount must be a number: {amount!r}")
    if not value.is_finite():
        raise ValidationError(f"Amount must be a number: {amount!r}")
    return int((value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def amount_to_words(amount, currency: str = "Dirhams") -> str:
    """
    Convert an amount to French words with currency and TTC notation.

    Decimal amounts are rounded to the nearest integer; amounts must stay
    below one million.

    >>> amount_to_words(7200)
    'Sept Mille Deux Cent Dirhams (TTC)'
    >>> amount_to_words(200, "Euros")
    'Deux Cents Euros (TTC)'
    """
    rounded = _round_to_units(amount)

    if rounded == 0:
        return f"Zéro {currency} (TTC)"

    if rounded < 0:
        return f"Moins {amount_to_words(-rounded, currency)}"

    if rounded > MAX_AMOUNT:
        raise ValidationError("Amount exceeds maximum supported value (999,999)")

    thousands, remainder = divmod(rounded, 1000)
    parts = []
    if thousands == 1:
        parts.append("Mille")
    elif thousands > 1:
        parts.append(f"{_three_digits(thousands)} Mille")
    if remainder:
        parts.append(_three_digits(remainder))

    result = " ".join(parts)
    if _STANDALONE_CENT.match(result):
        result += "s"

    return f"{result} {currency} (TTC)"


def format_invoice_amount(amount) -> str:
    """Amount in words as printed on invoices"""
    return amount_to_words(amount, settings.CURRENCY_LABEL)
