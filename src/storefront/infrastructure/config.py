"""Runtime settings read from the environment, and logging setup."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money
from storefront.domain.service.pricing import PricingRules

# Resolve the default data directory relative to the working directory.
DEFAULT_DATABASE_URL = f"sqlite:///{Path('data') / 'storefront.db'}"

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def _decimal(env: Mapping[str, str], name: str, default: str) -> Decimal:
    raw = env.get(name, default)
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ValidationError(f"{name} must be a decimal number, got {raw!r}") from exc
    if not value.is_finite() or value < 0:
        raise ValidationError(f"{name} must be a non-negative number, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    log_level: str = "INFO"
    pricing: PricingRules = field(default_factory=PricingRules)
    sustainability_threshold: Decimal = Decimal("4")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if env is None else env

        log_level = env.get("STOREFRONT_LOG_LEVEL", "INFO").upper()
        if log_level not in logging.getLevelNamesMapping():
            raise ValidationError(f"STOREFRONT_LOG_LEVEL {log_level!r} is not a logging level")

        pricing = PricingRules(
            free_shipping_threshold=Money(_decimal(env, "FREE_SHIPPING_THRESHOLD", "100.00")),
            standard_shipping_cost=Money(_decimal(env, "STANDARD_SHIPPING_COST", "10.00")),
            tax_rate=_decimal(env, "TAX_RATE", "0.08"),
        )

        return Settings(
            database_url=env.get("STOREFRONT_DATABASE_URL", DEFAULT_DATABASE_URL),
            log_level=log_level,
            pricing=pricing,
            sustainability_threshold=_decimal(env, "SUSTAINABILITY_THRESHOLD", "4"),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("storefront").setLevel(level)
