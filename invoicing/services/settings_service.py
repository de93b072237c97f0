"""
Settings Service - Typed access to the live studio settings
"""
import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from invoicing.core.exceptions import ConfigurationError
from invoicing.integrations.base import SettingsProvider
from invoicing.schemas import GeneralSettings, InvoiceSettings

logger = logging.getLogger(__name__)

GENERAL_SETTINGS_KEY = "general_settings"
INVOICE_SETTINGS_KEY = "invoice_settings"


async def fetch_general_settings(provider: SettingsProvider) -> Optional[GeneralSettings]:
    """Business information, or None when it has not been configured yet"""
    value = await provider.get(GENERAL_SETTINGS_KEY)
    if not value:
        logger.warning("General settings not configured")
        return None

    try:
        return GeneralSettings.model_validate(value)
    except PydanticValidationError as e:
        logger.error(f"Invalid general settings: {e}")
        raise ConfigurationError(
            f"Invalid general settings: {e.errors()[0]['msg']}",
            config_key=GENERAL_SETTINGS_KEY
        ) from e


async def fetch_invoice_settings(provider: SettingsProvider) -> InvoiceSettings:
    """Invoice configuration; defaults apply when nothing is stored"""
    value = await provider.get(INVOICE_SETTINGS_KEY)
    if not value:
        logger.debug("Invoice settings not configured, using defaults")
        return InvoiceSettings.defaults()

    try:
        return InvoiceSettings.model_validate(value)
    except PydanticValidationError as e:
        logger.error(f"Invalid invoice settings: {e}")
        raise ConfigurationError(
            f"Invalid invoice settings: {e.errors()[0]['msg']}",
            config_key=INVOICE_SETTINGS_KEY
        ) from e
