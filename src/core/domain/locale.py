"""Locale utilities for the storefront.

Storefront locales arrive as `ll_CC` with an optional `@CUR` suffix
(`de_DE@EUR`); the commerce API expects IETF tags (`de-DE`). Keeping the
conversion in the domain layer lets request helpers and adapters share it
without importing each other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_LOCALE_RE = re.compile(
    r"^(?P<language>[a-zA-Z]{2,3})(?:[_-](?P<country>[a-zA-Z]{2}))?(?:@(?P<currency>[a-zA-Z]{3}))?$"
)

COUNTRY_CURRENCIES: dict[str, str] = {
    "AT": "EUR",
    "AU": "AUD",
    "BE": "EUR",
    "CA": "CAD",
    "CH": "CHF",
    "DE": "EUR",
    "DK": "DKK",
    "ES": "EUR",
    "FI": "EUR",
    "FR": "EUR",
    "GB": "GBP",
    "IE": "EUR",
    "IT": "EUR",
    "JP": "JPY",
    "NL": "EUR",
    "NO": "NOK",
    "PL": "PLN",
    "PT": "EUR",
    "SE": "SEK",
    "US": "USD",
}


@dataclass(frozen=True)
class Locale:
    language: str
    country: str | None = None
    currency: str | None = None

    @classmethod
    def parse(cls, value: str) -> "Locale":
        """Parse `ll`, `ll_CC`, `ll-CC` or any of them with `@CUR`."""

        match = _LOCALE_RE.match(value.strip())
        if not match:
            raise ValueError(f"Invalid locale: {value!r}")
        country = match.group("country")
        currency = match.group("currency")
        return cls(
            language=match.group("language").lower(),
            country=country.upper() if country else None,
            currency=currency.upper() if currency else None,
        )

    @property
    def api_locale(self) -> str:
        """IETF tag used by the commerce API (`en-US`)."""

        if self.country:
            return f"{self.language}-{self.country}"
        return self.language

    def default_currency(self) -> str | None:
        if self.currency:
            return self.currency
        if self.country:
            return COUNTRY_CURRENCIES.get(self.country)
        return None

    def __str__(self) -> str:
        out = self.language
        if self.country:
            out += f"_{self.country}"
        if self.currency:
            out += f"@{self.currency}"
        return out
