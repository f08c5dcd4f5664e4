"""Paired-difference significance test between two price series.

Given matched series A and B (same sample order), tests whether the mean of
d_i = A_i - B_i is distinguishable from zero:

    mean  = Σd_i / n
    std   = √(Σ(d_i - mean)² / (n-1))
    se    = std / √n
    t     = mean / se
    p     = 2·(1 - Φ(|t|))
    CI95  = ±1.96·se

The p-value uses the standard normal tail for every n rather than a
Student's t lookup, and the half-width uses the fixed large-sample critical
value. Downstream thresholds are calibrated against this approximation.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from pricing.errors import InvalidInputError
from pricing.math_utils import normal_cdf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of a paired-difference test.

    Attributes:
        mean_difference: Mean of A_i - B_i
        standard_deviation: Sample standard deviation of the differences
        p_value: Two-sided p-value (normal approximation)
        confidence_interval: Half-width of the 95% confidence interval
        is_significant: Whether p_value is below the significance level
        t_statistic: mean_difference / standard_error
        standard_error: standard_deviation / √n
        n_samples: Number of paired samples
    """

    mean_difference: float
    standard_deviation: float
    p_value: float
    confidence_interval: float
    is_significant: bool
    t_statistic: float = 0.0
    standard_error: float = 0.0
    n_samples: int = 0

    @property
    def confidence_bounds(self) -> tuple[float, float]:
        """Lower and upper confidence bounds on the mean difference."""
        return (
            self.mean_difference - self.confidence_interval,
            self.mean_difference + self.confidence_interval,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mean_difference": self.mean_difference,
            "standard_deviation": self.standard_deviation,
            "p_value": self.p_value,
            "confidence_interval": self.confidence_interval,
            "is_significant": self.is_significant,
            "t_statistic": self.t_statistic,
            "standard_error": self.standard_error,
            "n_samples": self.n_samples,
        }


class SignificanceAnalyzer:
    """Compares two matched price series.

    Example:
        >>> analyzer = SignificanceAnalyzer()
        >>> result = analyzer.analyze(analytic_prices, lattice_prices)
        >>> if result.is_significant:
        ...     print(f"Mean gap {result.mean_difference:.4f} (p={result.p_value:.3g})")
    """

    def __init__(self, significance_level: float = 0.05, critical_value: float = 1.96):
        """Initialize analyzer.

        Args:
            significance_level: p-value below which a difference is significant
            critical_value: Normal critical value for the confidence half-width
        """
        self.significance_level = significance_level
        self.critical_value = critical_value

    @classmethod
    def from_settings(cls, settings=None) -> "SignificanceAnalyzer":
        """Build an analyzer from application settings."""
        if settings is None:
            from config.settings import get_settings

            settings = get_settings()
        return cls(
            significance_level=settings.significance_level,
            critical_value=settings.critical_value,
        )

    @staticmethod
    def _validate(series_a: Sequence[float], series_b: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
        a = np.asarray(series_a, dtype=np.float64)
        b = np.asarray(series_b, dtype=np.float64)

        if a.ndim != 1 or b.ndim != 1:
            raise InvalidInputError("Invalid input: price series must be one-dimensional")
        if len(a) == 0 or len(b) == 0:
            raise InvalidInputError("Invalid input: price series must not be empty")
        if len(a) != len(b):
            raise InvalidInputError(
                f"Invalid input: price series lengths differ ({len(a)} vs {len(b)})",
                context={"len_a": len(a), "len_b": len(b)},
            )
        if not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
            raise InvalidInputError("Invalid input: price series contain non-finite values")
        return a, b

    def analyze(self, series_a: Sequence[float], series_b: Sequence[float]) -> AnalysisResult:
        """Run the paired-difference test.

        Args:
            series_a: First price series
            series_b: Second price series, same length and sample order

        Returns:
            AnalysisResult

        Raises:
            InvalidInputError: If the series are empty, of different lengths
                or contain NaN/inf
        """
        a, b = self._validate(series_a, series_b)
        diffs = a - b
        n = len(diffs)

        mean_diff = float(np.mean(diffs))
        # A single pair carries no dispersion information
        std = float(np.std(diffs, ddof=1)) if n > 1 else 0.0
        standard_error = std / math.sqrt(n)

        if standard_error > 0:
            t_stat = mean_diff / standard_error
        elif mean_diff == 0:
            t_stat = 0.0
        else:
            t_stat = math.copysign(math.inf, mean_diff)

        p_value = 2.0 * (1.0 - normal_cdf(abs(t_stat)))
        half_width = self.critical_value * standard_error
        is_significant = p_value < self.significance_level

        logger.debug(
            f"Paired test n={n}: mean={mean_diff:.6g} std={std:.6g} "
            f"t={t_stat:.4g} p={p_value:.4g} significant={is_significant}"
        )

        return AnalysisResult(
            mean_difference=mean_diff,
            standard_deviation=std,
            p_value=p_value,
            confidence_interval=half_width,
            is_significant=is_significant,
            t_statistic=t_stat,
            standard_error=standard_error,
            n_samples=n,
        )
