"""Currency -- ISO 4217 registry and minor-unit precision."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar

from fincalc_kernel.exceptions import InvalidCurrencyError


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    minor_units: int
    name: str

    @property
    def quantum(self) -> Decimal:
        """Smallest representable unit, for ``Decimal.quantize()``."""
        return Decimal(1).scaleb(-self.minor_units)


class CurrencyRegistry:
    """Registry of ISO 4217 currencies with their minor units."""

    # Source: https://www.iso.org/iso-4217-currency-codes.html
    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        info.code: info
        for info in (
            # Two minor units
            CurrencyInfo("USD", 2, "US Dollar"),
            CurrencyInfo("EUR", 2, "Euro"),
            CurrencyInfo("GBP", 2, "Pound Sterling"),
            CurrencyInfo("CHF", 2, "Swiss Franc"),
            CurrencyInfo("CAD", 2, "Canadian Dollar"),
            CurrencyInfo("AUD", 2, "Australian Dollar"),
            CurrencyInfo("NZD", 2, "New Zealand Dollar"),
            CurrencyInfo("CNY", 2, "Chinese Yuan"),
            CurrencyInfo("HKD", 2, "Hong Kong Dollar"),
            CurrencyInfo("SGD", 2, "Singapore Dollar"),
            CurrencyInfo("INR", 2, "Indian Rupee"),
            CurrencyInfo("BRL", 2, "Brazilian Real"),
            CurrencyInfo("MXN", 2, "Mexican Peso"),
            CurrencyInfo("ZAR", 2, "South African Rand"),
            CurrencyInfo("SEK", 2, "Swedish Krona"),
            CurrencyInfo("NOK", 2, "Norwegian Krone"),
            CurrencyInfo("DKK", 2, "Danish Krone"),
            CurrencyInfo("PLN", 2, "Polish Zloty"),
            CurrencyInfo("CZK", 2, "Czech Koruna"),
            CurrencyInfo("HUF", 2, "Hungarian Forint"),
            CurrencyInfo("TRY", 2, "Turkish Lira"),
            CurrencyInfo("RUB", 2, "Russian Ruble"),
            CurrencyInfo("ILS", 2, "Israeli New Shekel"),
            CurrencyInfo("AED", 2, "UAE Dirham"),
            CurrencyInfo("SAR", 2, "Saudi Riyal"),
            CurrencyInfo("THB", 2, "Thai Baht"),
            CurrencyInfo("MYR", 2, "Malaysian Ringgit"),
            CurrencyInfo("IDR", 2, "Indonesian Rupiah"),
            CurrencyInfo("PHP", 2, "Philippine Peso"),
            CurrencyInfo("EGP", 2, "Egyptian Pound"),
            CurrencyInfo("NGN", 2, "Nigerian Naira"),
            # Zero minor units
            CurrencyInfo("JPY", 0, "Japanese Yen"),
            CurrencyInfo("KRW", 0, "South Korean Won"),
            CurrencyInfo("CLP", 0, "Chilean Peso"),
            CurrencyInfo("ISK", 0, "Icelandic Krona"),
            CurrencyInfo("VND", 0, "Vietnamese Dong"),
            CurrencyInfo("XAF", 0, "Central African CFA Franc"),
            CurrencyInfo("XOF", 0, "West African CFA Franc"),
            # Three minor units
            CurrencyInfo("BHD", 3, "Bahraini Dinar"),
            CurrencyInfo("JOD", 3, "Jordanian Dinar"),
            CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
            CurrencyInfo("OMR", 3, "Omani Rial"),
            CurrencyInfo("TND", 3, "Tunisian Dinar"),
            # Four minor units
            CurrencyInfo("CLF", 4, "Chilean Unidad de Fomento"),
            # Special codes
            CurrencyInfo("XAU", 0, "Gold (troy ounce)"),
            CurrencyInfo("XTS", 0, "Testing Code"),
            CurrencyInfo("XXX", 0, "No currency"),
        )
    }

    @staticmethod
    def _normalize(code: object) -> str:
        if not code or not isinstance(code, str):
            return ""
        return code.upper().strip()

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is registered."""
        return cls._normalize(code) in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        return cls._CURRENCIES.get(cls._normalize(code))

    @classmethod
    def get_minor_units(cls, code: str) -> int:
        """Minor units for a registered currency.

        Raises:
            InvalidCurrencyError: If the code is not registered.
        """
        info = cls.get_info(code)
        if info is None:
            raise InvalidCurrencyError(code)
        return info.minor_units

    @classmethod
    def validate(cls, code: str) -> str:
        """Validate and normalize a currency code.

        Raises:
            InvalidCurrencyError: If the code is empty, not three letters,
                or not registered.
        """
        normalized = cls._normalize(code)
        if len(normalized) != 3 or normalized not in cls._CURRENCIES:
            raise InvalidCurrencyError(code)
        return normalized

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        return frozenset(cls._CURRENCIES)
