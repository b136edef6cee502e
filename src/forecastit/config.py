"""Projection configuration."""

import os
from dataclasses import dataclass
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from forecastit.domain.errors import ValidationError

ALLOWED_HORIZON_MONTHS = (1, 3, 6)
DEFAULT_HORIZON_MONTHS = 3


@dataclass(frozen=True)
class ProjectionConfig:
    """Settings the projection engine needs, passed in explicitly."""

    horizon_months: int = DEFAULT_HORIZON_MONTHS

    def __post_init__(self):
        if self.horizon_months not in ALLOWED_HORIZON_MONTHS:
            allowed = ", ".join(str(m) for m in ALLOWED_HORIZON_MONTHS)
            raise ValidationError(
                f"Projection horizon must be one of {allowed} months, got {self.horizon_months}"
            )

    def horizon_end(self, today: date, months: Optional[int] = None) -> date:
        """Last date covered by projections when no end date is given."""
        return today + relativedelta(months=months if months is not None else self.horizon_months)


def load_config(horizon_months: Optional[int] = None) -> ProjectionConfig:
    """Build a ProjectionConfig.

    Args:
        horizon_months: Explicit horizon. If None, checks FORECASTIT_HORIZON_MONTHS
            environment variable, then defaults to 3 months.

    Returns:
        ProjectionConfig instance

    Raises:
        ValidationError: If the horizon is not a supported value
    """
    if horizon_months is None:
        raw = os.environ.get("FORECASTIT_HORIZON_MONTHS")
        if raw:
            try:
                horizon_months = int(raw)
            except ValueError:
                raise ValidationError(f"FORECASTIT_HORIZON_MONTHS must be an integer, got '{raw}'")

    if horizon_months is None:
        horizon_months = DEFAULT_HORIZON_MONTHS

    return ProjectionConfig(horizon_months=horizon_months)
