"""Explicit application context handed to calendar and dashboard components."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Callable
from zoneinfo import ZoneInfo

from .config import Settings, get_settings

if TYPE_CHECKING:
    from ..repositories.flags import FlagStore


@dataclass(frozen=True, slots=True)
class CurrencyInfo:
    code: str
    name: str
    symbol: str


CURRENCIES: tuple[CurrencyInfo, ...] = (
    CurrencyInfo(code="USD", name="US Dollar", symbol="$"),
    CurrencyInfo(code="EUR", name="Euro", symbol="€"),
    CurrencyInfo(code="GBP", name="British Pound", symbol="£"),
    CurrencyInfo(code="JPY", name="Japanese Yen", symbol="¥"),
    CurrencyInfo(code="CAD", name="Canadian Dollar", symbol="C$"),
    CurrencyInfo(code="AUD", name="Australian Dollar", symbol="A$"),
    CurrencyInfo(code="CHF", name="Swiss Franc", symbol="Fr"),
    CurrencyInfo(code="BAM", name="Bosnian Mark", symbol="KM"),
)


def currency_symbol(code: str) -> str:
    """Return the display symbol for a currency code, defaulting to "$"."""

    for currency in CURRENCIES:
        if currency.code == code.upper():
            return currency.symbol
    return "$"


def _now_in(tz_name: str) -> datetime:
    if tz_name.upper() == "UTC":
        return datetime.now(timezone.utc)
    return datetime.now(ZoneInfo(tz_name))


@dataclass
class AppContext:
    """Settings, persisted flags and the wall clock for one unit of work.

    Components never reach for process-wide state; whatever they need to format
    money, read flags or decide what "today" is comes through this object.
    """

    settings: Settings = field(default_factory=get_settings)
    flags: "FlagStore | None" = None
    clock: Callable[[], datetime] | None = None

    def now(self) -> datetime:
        if self.clock is not None:
            return self.clock()
        return _now_in(self.settings.timezone)

    def today(self) -> date:
        return self.now().date()

    @property
    def currency_symbol(self) -> str:
        return currency_symbol(self.settings.currency_code)

    def format_money(self, amount: object) -> str:
        """Format a whole-currency amount with thousands separators."""

        return f"{self.currency_symbol}{int(amount):,}"
