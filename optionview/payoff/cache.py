"""Recompute-on-change cache for payoff curves and metrics.

The engine itself is stateless. Callers that redraw often (a chart, a
repeated CLI readout) keep a PayoffCache and only pay for a recalculation
when the numeric fields of their positions change.
"""

import hashlib
import json
import logging
from typing import Optional

from optionview.models import PayoffData, PayoffMetrics, Position
from optionview.payoff.calculator import DEFAULT_STEPS, calculate_payoff_data
from optionview.payoff.metrics import calculate_metrics

logger = logging.getLogger(__name__)


def position_fingerprint(positions: list[Position]) -> str:
    """Hash the fields that affect payoff calculations, in input order."""
    payload = [
        {
            "type": position.position_type.value,
            "strike": position.strike_price,
            "premium": position.option_price,
            "contracts": position.contracts,
            "cost_basis": position.cost_basis_per_share,
        }
        for position in positions
    ]
    encoded = json.dumps(payload, sort_keys=True).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


class PayoffCache:
    """Single-entry cache of (PayoffData, PayoffMetrics) for a position list."""

    def __init__(self, steps: int = DEFAULT_STEPS):
        self.steps = steps
        self.hits = 0
        self.misses = 0
        self._fingerprint: Optional[str] = None
        self._value: Optional[tuple[PayoffData, PayoffMetrics]] = None

    @property
    def fingerprint(self) -> Optional[str]:
        """Fingerprint of the cached positions, or None when empty."""
        return self._fingerprint

    def get(self, positions: list[Position]) -> tuple[PayoffData, PayoffMetrics]:
        """Return curves and metrics, recalculating only if positions changed."""
        fingerprint = position_fingerprint(positions)

        if self._value is not None and fingerprint == self._fingerprint:
            self.hits += 1
            logger.debug("Payoff cache hit (%s)", fingerprint[:12])
            return self._value

        self.misses += 1
        logger.debug("Payoff cache miss (%s), recalculating", fingerprint[:12])

        payoff_data = calculate_payoff_data(positions, self.steps)
        metrics = calculate_metrics(positions, self.steps)

        self._fingerprint = fingerprint
        self._value = (payoff_data, metrics)
        return self._value

    def invalidate(self) -> None:
        """Drop the cached entry."""
        self._fingerprint = None
        self._value = None
