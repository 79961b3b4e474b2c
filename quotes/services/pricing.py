import logging
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from numbers import Real
from typing import Iterable, List, Mapping

from django.conf import settings

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def _finite(value) -> bool:
    return _is_number(value) and math.isfinite(value)


def _clamp_percent(value) -> float:
    if not _finite(value):
        return 0.0
    return float(max(0, min(100, value)))


def _services(prop) -> Mapping:
    if prop is None:
        return {}
    services = prop.get("services") if isinstance(prop, Mapping) else getattr(prop, "services", None)
    return services if isinstance(services, Mapping) else {}


@dataclass(frozen=True)
class DiscountRule:
    min_days: int
    discount_percent: float
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Mapping) -> "DiscountRule":
        return cls(
            min_days=data["minDays"],
            discount_percent=data["discountPercent"],
            enabled=data.get("enabled") is True,
        )


class PricingService:
    """PricingService turns an owner's nightly rate into the guest-facing price.

    Rules summary (implemented):
    - Commission is a markup on top of the owner's rate. A property's own
      `services.commissionPercent` wins when it is a finite number in [0, 100];
      otherwise the system-wide default applies, clamped into [0, 100].
    - Length-of-stay discounts come from `services.discountRules`. Every enabled
      rule whose `minDays` the stay reaches is eligible and the largest
      `discountPercent` among them is applied (not the rule with the largest
      `minDays`).
    - Money values are rounded half-up to 2 decimals.

    Bad price inputs degrade to 0 or to the unchanged price instead of raising,
    since a checkout summary showing 0 is easier to catch than a crashed page.
    The one hard precondition is a non-negative number of nights.
    """

    @staticmethod
    def _round(value: Decimal) -> Decimal:
        return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    @staticmethod
    def resolve_commission(prop, system_commission: float = 0) -> float:
        custom = _services(prop).get("commissionPercent")
        if custom is not None:
            try:
                custom = float(custom)
            except (TypeError, ValueError):
                custom = None
            if custom is not None and math.isfinite(custom) and 0 <= custom <= 100:
                return custom
            logger.warning("Ignoring invalid property commission %r", _services(prop).get("commissionPercent"))
        return _clamp_percent(system_commission)

    @staticmethod
    def discount_rules(prop) -> List[DiscountRule]:
        raw = _services(prop).get("discountRules")
        if not isinstance(raw, (list, tuple)):
            return []
        return [
            DiscountRule.from_dict(rule)
            for rule in raw
            if isinstance(rule, Mapping)
            and _is_number(rule.get("minDays"))
            and _is_number(rule.get("discountPercent"))
            and rule.get("enabled") is True
        ]

    @staticmethod
    def best_discount_percent(nights: int, rules: Iterable[DiscountRule]) -> float:
        eligible = [r.discount_percent for r in rules if r.enabled and nights >= r.min_days]
        return max([0] + eligible)

    @classmethod
    def apply_commission(cls, nightly_price, commission_percent) -> float:
        if not _finite(nightly_price) or nightly_price <= 0:
            return 0
        if not _finite(commission_percent) or commission_percent <= 0:
            return nightly_price

        pct = Decimal(str(min(100, commission_percent)))
        price = Decimal(str(nightly_price))
        return float(cls._round(price + price * pct / Decimal("100")))

    @classmethod
    def apply_discount(cls, price, nights: int, rules: Iterable[DiscountRule]) -> float:
        if not _finite(price) or price <= 0 or nights <= 0:
            return price

        pct = cls.best_discount_percent(nights, rules)
        if pct <= 0:
            return price

        amount = Decimal(str(price))
        return float(cls._round(amount - amount * Decimal(str(pct)) / Decimal("100")))

    @classmethod
    def compose_booking_price(cls, nightly_price, nights: int, prop=None, system_commission: float = 0) -> dict:
        if nights is None or nights < 0:
            raise ValueError("nights cannot be negative")

        commission_percent = cls.resolve_commission(prop, system_commission)
        per_night = cls.apply_commission(nightly_price, commission_percent)
        nights_d = Decimal(nights)

        if per_night <= 0:
            # invalid nightly price: nothing downstream is chargeable
            logger.warning("Non-chargeable nightly price %r", nightly_price)
            base = Decimal("0")
        else:
            base = Decimal(str(nightly_price))

        total_with_commission = Decimal(str(per_night)) * nights_d
        discount_percent = cls.best_discount_percent(nights, cls.discount_rules(prop))
        discount_amount = total_with_commission * Decimal(str(discount_percent)) / Decimal("100")
        final_price = total_with_commission - discount_amount

        commission_amount = base * Decimal(str(commission_percent)) / Decimal("100") * nights_d

        breakdown = {
            "original_price": float(base * nights_d),
            "price_with_commission": float(total_with_commission),
            "discount_amount": float(cls._round(discount_amount)),
            "final_price": float(cls._round(final_price)),
            "commission_percent": commission_percent,
            "commission_amount": float(cls._round(commission_amount)),
            "discount_percent": discount_percent,
            "nights": int(nights),
        }
        logger.debug("Booking price breakdown: %s", breakdown)
        return breakdown


class SystemSettingsService:
    """System-wide defaults the pricing rules fall back on."""

    @staticmethod
    def default_commission_percent() -> float:
        raw = getattr(settings, "SYSTEM_COMMISSION_PERCENT", 0)
        try:
            value = float(raw)
        except (TypeError, ValueError):
            logger.warning("SYSTEM_COMMISSION_PERCENT=%r is not a number, using 0", raw)
            return 0.0
        if not math.isfinite(value):
            return 0.0
        return max(0.0, min(100.0, value))
