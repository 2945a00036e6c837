"""Effective package price resolution: date overrides over base prices."""

import datetime as dt
import logging

from ..core.config import settings
from ..core.exceptions import PricingDataMissingError
from ..core.pricing_config import default_base_price
from ..repositories.date_override_repository import DateOverrideRepository
from ..repositories.starting_price_repository import StartingPriceRepository
from ..schemas.date_override import PriceSource, ResolvedPrice
from ..schemas.starting_price import DurationKey, PackageTier, Sport

logger = logging.getLogger(__name__)


class PriceResolver:
    """Resolves the package price for a date, sport, package and duration."""

    def __init__(
        self,
        starting_prices: StartingPriceRepository,
        date_overrides: DateOverrideRepository,
        default_currency: str = settings.default_currency,
    ):
        self.starting_prices = starting_prices
        self.date_overrides = date_overrides
        self.default_currency = default_currency

    async def base_price(self, sport: Sport, package: PackageTier, duration: DurationKey) -> ResolvedPrice:
        """
        Base price from the active StartingPrice row, else the static default table.

        Raises:
            PricingDataMissingError: If neither source has a value
        """
        row = await self.starting_prices.get_active(sport)
        if row is not None:
            prices = row.prices_by_duration.get(duration)
            if prices is not None:
                return ResolvedPrice(
                    amount=prices.price_for(package),
                    currency=row.currency,
                    source=PriceSource.STARTING_PRICE,
                )

        amount = default_base_price(sport, package, duration)
        if amount is None:
            raise PricingDataMissingError(sport.value, package.value, duration)

        return ResolvedPrice(
            amount=amount,
            currency=self.default_currency,
            source=PriceSource.DEFAULT,
        )

    async def currency_for(self, sport: Sport) -> str:
        """Currency of the active price table for ``sport``, else the default."""
        row = await self.starting_prices.get_active(sport)
        return row.currency if row is not None else self.default_currency

    async def effective_price(
        self,
        date: dt.date,
        sport: Sport,
        package: PackageTier,
        duration: DurationKey,
    ) -> ResolvedPrice:
        """An enabled override for (date, duration) with a value for (sport, package) wins."""
        override = await self.date_overrides.find_for(date, duration)
        amount = override.override_for(sport, package) if override is not None else None
        if amount is None:
            return await self.base_price(sport, package, duration)

        logger.debug(
            "Date override applied",
            extra={
                "override_id": override.id,
                "date": date.isoformat(),
                "sport": sport.value,
                "package": package.value,
                "amount": amount,
            }
        )
        return ResolvedPrice(
            amount=amount,
            currency=await self.currency_for(sport),
            source=PriceSource.DATE_OVERRIDE,
            override_id=override.id,
        )
