import uuid
from datetime import timedelta
from decimal import Decimal

import pytest

from conftest import GENERAL_SETTINGS, TODAY, run
from invoicing.core.exceptions import ConfigurationError, DuplicateInvoiceError, ValidationError
from invoicing.schemas import InvoiceCreate


def test_create_record(harness):
    data = harness.payment(amount=7200, created_by="reception")
    invoice = run(harness.records.create_record(data))

    assert invoice.invoice_number == "17102026-01"
    assert invoice.payment_id == data.payment_id
    assert invoice.member_id == data.member_id
    assert invoice.issue_date == TODAY
    assert invoice.amount == Decimal("6000.00")
    assert invoice.tax_amount == Decimal("1200.00")
    assert invoice.total_amount == Decimal("7200.00")
    assert invoice.vat_rate == Decimal("20")
    assert invoice.status == "issued"
    assert invoice.pdf_url is None
    assert invoice.created_by == "reception"


def test_record_snapshots_business_information(harness):
    invoice = run(harness.records.create_record(harness.payment()))

    assert invoice.business_name == "Studio Atlas"
    assert invoice.business_address.city == "Casablanca"
    assert invoice.business_tax_id == "001234567000089"
    assert invoice.business_phone == "+212 522 000 000"
    assert invoice.business_email == "contact@studio-atlas.ma"
    assert invoice.business_logo_url == GENERAL_SETTINGS["logo_url"]


def test_snapshot_is_not_affected_by_later_settings_changes(harness):
    invoice = run(harness.records.create_record(harness.payment()))
    harness.settings_provider.values["general_settings"] = {**GENERAL_SETTINGS, "business_name": "New Name"}

    stored = run(harness.store.get(invoice.id))
    assert stored.business_name == "Studio Atlas"
    assert stored.business_snapshot().business_name == "Studio Atlas"


def test_invoice_settings_are_applied(harness):
    harness.settings_provider.values["invoice_settings"] = {
        "vat_rate": 10,
        "invoice_footer_notes": "Merci pour votre confiance",
        "auto_generate": True,
    }
    invoice = run(harness.records.create_record(harness.payment(amount=1100)))

    assert invoice.vat_rate == Decimal("10")
    assert invoice.amount == Decimal("1000.00")
    assert invoice.tax_amount == Decimal("100.00")
    assert invoice.footer_notes == "Merci pour votre confiance"


def test_default_invoice_settings_when_not_configured(harness):
    invoice = run(harness.records.create_record(harness.payment()))
    assert invoice.vat_rate == Decimal("20")
    assert invoice.footer_notes is None


def test_second_invoice_for_same_payment_is_rejected(harness):
    data = harness.payment()
    first = run(harness.records.create_record(data))

    with pytest.raises(DuplicateInvoiceError) as exc_info:
        run(harness.records.create_record(data))

    assert exc_info.value.message == "Invoice already exists for this payment"
    assert exc_info.value.details["invoice_number"] == first.invoice_number
    assert len(harness.store.invoices) == 1


def test_duplicate_does_not_consume_a_number(harness):
    data = harness.payment()
    run(harness.records.create_record(data))
    with pytest.raises(DuplicateInvoiceError):
        run(harness.records.create_record(data))

    other = run(harness.records.create_record(harness.payment()))
    assert other.invoice_number == "17102026-02"


def test_store_constraint_catches_duplicates_the_lookup_misses(harness):
    data = harness.payment()
    run(harness.records.create_record(data))

    async def no_lookup(payment_id):
        return None

    harness.store.get_by_payment = no_lookup
    with pytest.raises(DuplicateInvoiceError):
        run(harness.records.create_record(data))
    assert len(harness.store.invoices) == 1


def test_missing_general_settings(harness):
    harness.settings_provider.values.pop("general_settings")

    with pytest.raises(ConfigurationError) as exc_info:
        run(harness.records.create_record(harness.payment()))

    assert exc_info.value.message == (
        "General settings not configured. Please configure business information in Settings."
    )
    assert exc_info.value.details["config_key"] == "general_settings"
    assert harness.store.invoices == {}
    assert harness.sequence_store.counters == {}


def test_malformed_general_settings(harness):
    harness.settings_provider.values["general_settings"] = {"business_name": "Studio Atlas"}

    with pytest.raises(ConfigurationError) as exc_info:
        run(harness.records.create_record(harness.payment()))
    assert exc_info.value.message.startswith("Invalid general settings")


def test_invalid_amount_does_not_consume_a_number(harness):
    with pytest.raises(ValidationError):
        run(harness.records.create_record(harness.payment(amount=-10)))
    assert harness.sequence_store.counters == {}


def test_numbers_follow_the_issue_day(harness):
    first = run(harness.records.create_record(harness.payment()))
    harness.today = TODAY + timedelta(days=1)
    second = run(harness.records.create_record(harness.payment()))

    assert first.invoice_number == "17102026-01"
    assert second.invoice_number == "18102026-01"
    assert second.issue_date == TODAY + timedelta(days=1)


def test_subscription_is_recorded(harness):
    subscription_id = uuid.uuid4()
    data = InvoiceCreate(
        payment_id=uuid.uuid4(),
        member_id=harness.members.add(),
        subscription_id=subscription_id,
        amount=Decimal("300"),
    )
    invoice = run(harness.records.create_record(data))
    assert invoice.subscription_id == subscription_id


def test_number_and_issue_date_come_from_one_clock_read(harness):
    # a clock that moves on every read, as around midnight
    days = iter([TODAY, TODAY + timedelta(days=1), TODAY + timedelta(days=2)])
    clock = lambda: next(days)
    harness.records.today = clock
    harness.numbering.today = clock

    invoice = run(harness.records.create_record(harness.payment()))

    assert invoice.issue_date == TODAY
    assert invoice.invoice_number == "17102026-01"
    assert invoice.invoice_number.startswith(invoice.issue_date.strftime("%d%m%Y"))


def test_vat_rate_precision_matches_storage(harness):
    harness.settings_provider.values["invoice_settings"] = {"vat_rate": "5.555"}
    with pytest.raises(ConfigurationError) as exc_info:
        run(harness.records.create_record(harness.payment()))
    assert exc_info.value.details["config_key"] == "invoice_settings"
    assert harness.sequence_store.counters == {}

    harness.settings_provider.values["invoice_settings"] = {"vat_rate": "5.5"}
    invoice = run(harness.records.create_record(harness.payment(amount=211)))
    assert invoice.vat_rate == Decimal("5.5")
    assert invoice.amount == Decimal("200.00")
