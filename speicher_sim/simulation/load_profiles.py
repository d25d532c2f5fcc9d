"""
Household load profiles scaled from a standard reference shape.

The hourly *shape* of consumption is taken from a standardized reference
profile (BDEW H0 for German households); only its magnitude follows the
user's stated annual consumption. Individual behavioural variation is
deliberately ignored, which keeps the model simple and auditable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from ..errors import InvalidParameterError
from .series import as_hourly_series, ensure_finite_non_negative, require_positive

BDEW_REFERENCE_TOTAL_KWH = 1_000_000.0
"""Annual total the BDEW reference weights are normalized to (1 GWh in kWh)."""

SUPPORTED_PROFILE_KEYS = ("H0",)


def scale_load_profile(
    reference_weights: Sequence[float] | np.ndarray,
    annual_kwh: float,
    reference_total_kwh: float = BDEW_REFERENCE_TOTAL_KWH,
) -> np.ndarray:
    """
    Scale a normalized 8760-hour reference shape to an absolute load series.

    Every weight is multiplied by ``annual_kwh / reference_total_kwh``.

    Args:
        reference_weights: 8760 relative weights of the reference year.
            For the BDEW H0 table they sum to roughly 1e6 (1 GWh).
        annual_kwh: Target annual consumption in kWh (> 0).
        reference_total_kwh: Total the weights are normalized to.

    Returns:
        New float64 array with the hourly consumption in kWh.

    Raises:
        LengthMismatchError: If the reference is not exactly 8760 values.
        InvalidParameterError: If ``annual_kwh`` or ``reference_total_kwh``
            is not a positive finite number.
        DataValidityError: If a weight is negative or non-finite.

    Example:
        ```python
        weights = load_weights_from_somewhere()  # 8760 values, sum ~ 1e6
        load_kwh = scale_load_profile(weights, annual_kwh=4000.0)
        load_kwh.sum()  # ~4000.0
        ```
    """
    weights = as_hourly_series(reference_weights, "reference_weights")
    annual_kwh = require_positive(annual_kwh, "annual_kwh")
    reference_total_kwh = require_positive(reference_total_kwh, "reference_total_kwh")
    ensure_finite_non_negative(weights, "reference_weights")
    return weights * (annual_kwh / reference_total_kwh)


@dataclass(frozen=True, eq=False)
class StandardLoadProfile:
    """
    Validated standard load-shape reference (e.g. BDEW H0).

    Attributes:
        weights: 8760 relative hourly weights, stored as a read-only array.
        key: Profile identifier. Only ``"H0"`` is supported.
        reference_total_kwh: Annual total the weights are normalized to.
    """

    weights: np.ndarray = field(repr=False)
    key: str = "H0"
    reference_total_kwh: float = BDEW_REFERENCE_TOTAL_KWH

    def __post_init__(self) -> None:
        if self.key not in SUPPORTED_PROFILE_KEYS:
            raise InvalidParameterError("key", f"unsupported load profile {self.key!r}")
        weights = as_hourly_series(self.weights, "reference_weights")
        ensure_finite_non_negative(weights, "reference_weights")
        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)
        require_positive(self.reference_total_kwh, "reference_total_kwh")

    @property
    def weight_sum(self) -> float:
        """Actual sum of the stored weights (close to ``reference_total_kwh``)."""
        return float(self.weights.sum())

    def scaled(self, annual_kwh: float) -> np.ndarray:
        """Return the hourly load series in kWh for ``annual_kwh``."""
        return scale_load_profile(self.weights, annual_kwh, self.reference_total_kwh)
