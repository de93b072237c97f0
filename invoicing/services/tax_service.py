"""
Tax Service - HT / TVA / TTC breakdown of a tax-inclusive total
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from invoicing.core.exceptions import ValidationError


CENT = Decimal("0.01")


@dataclass(frozen=True)
class TaxBreakdown:
    net_amount: Decimal  # HT
    tax_amount: Decimal  # TVA
    total_amount: Decimal  # TTC
    vat_rate: Decimal  # percentage, e.g. 20


def to_decimal(value, name: str = "value") -> Decimal:
    """Convert int/float/str/Decimal without float representation noise"""
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"{name} must be a number: {value!r}")
    if not result.is_finite():
        raise ValidationError(f"{name} must be a number: {value!r}")
    return result


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_tax(total_amount, vat_rate) -> TaxBreakdown:
    """
    Split a total (TTC) into net (HT) and tax (TVA).

    NET = TOTAL / (1 + RATE/100), rounded to cents first; TAX is then the
    rounded total minus the rounded net, so NET + TAX == TOTAL to the cent.

    >>> calculate_tax(7200, 20)
    TaxBreakdown(net_amount=Decimal('6000.00'), tax_amount=Decimal('1200.00'), total_amount=Decimal('7200.00'), vat_rate=Decimal('20'))
    """
    total = to_decimal(total_amount, "Total amount")
    rate = to_decimal(vat_rate, "VAT rate")

    if total < 0:
        raise ValidationError("Total amount cannot be negative")
    if rate < 0 or rate > 100:
        raise ValidationError("VAT rate must be between 0 and 100")

    net = total / (1 + rate / 100)

    rounded_net = round_cents(net)
    rounded_total = round_cents(total)
    tax = rounded_total - rounded_net

    return TaxBreakdown(
        net_amount=rounded_net,
        tax_amount=tax,
        total_amount=rounded_total,
        vat_rate=rate,
    )
