"""
Decision stumps and the exhaustive split search used to fit them.

A decision stump is a regression tree with a single split: one feature, one
threshold and two constant leaves. Fitting searches every (feature, threshold)
pair, where thresholds are the observed feature values, and keeps the split
with the smallest within-leaf squared error. For squared error the optimal
constant of each leaf is its mean, so the error of a candidate split is

    Σ_{i ∈ L} (y_i - ȳ_L)^2 + Σ_{i ∈ R} (y_i - ȳ_R)^2

Reference: ESL Section 9.2.2 (Regression Trees) and Section 10.9.
"""

from dataclasses import dataclass, asdict, field
import logging

import numpy as np

from .utils import sum_squared_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecisionStump:
    """
    Single-split regression tree.

    Attributes:
        feature_index: Column the split is made on.
        threshold: Rows with `row[feature_index] <= threshold` go left.
        left_value: Prediction for rows that go left.
        right_value: Prediction for rows that go right.
    """

    feature_index: int = 0
    threshold: float = 0.0
    left_value: float = 0.0
    right_value: float = 0.0

    def predict(self, features) -> float:
        """
        Predict for a single row.

        Raises IndexError if `features` is shorter than `feature_index + 1`.
        """
        if features[self.feature_index] <= self.threshold:
            return self.left_value
        return self.right_value

    def predict_batch(self, X: np.ndarray) -> np.ndarray:
        """Vectorised `predict` over the rows of a 2-D matrix."""
        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2 or X.shape[1] <= self.feature_index:
            raise ValueError(
                f"Stump splits on feature {self.feature_index} but X has shape {X.shape}"
            )
        return np.where(
            X[:, self.feature_index] <= self.threshold,
            self.left_value,
            self.right_value
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class SplitResult:
    """Outcome of a split search; `found` is False for the zero fallback stump."""

    stump: DecisionStump = field(default_factory=DecisionStump)
    error: float = np.inf
    found: bool = False


class StumpFitter:
    """
    Exhaustive search for the squared-error optimal decision stump.

    Every row's value of every feature is tried as a threshold, in row order
    and without de-duplication. A candidate replaces the current best only if
    its error is strictly smaller, so among equal-error splits the first one
    found wins (lowest feature index, then earliest row).
    """

    def find_best_split(self, X: np.ndarray, y: np.ndarray) -> SplitResult:
        """
        Search all (feature, threshold) pairs for the best split.

        Args:
            X: Features, shape (n_samples, n_features). Must be non-empty.
            y: Targets (residuals when boosting), shape (n_samples,).

        Returns:
            SplitResult with the best stump and its total squared error. If no
            threshold separates the rows into two non-empty groups, the zero
            stump is returned with `found=False` and `error=inf`.
        """
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        n_samples, n_features = X.shape

        best = SplitResult()

        for feature_index in range(n_features):
            column = X[:, feature_index]

            for threshold in column:
                left_mask = column <= threshold
                n_left = np.count_nonzero(left_mask)

                # Both leaves must be non-empty
                if n_left == 0 or n_left == n_samples:
                    continue

                y_left = y[left_mask]
                y_right = y[~left_mask]

                total_error = sum_squared_error(y_left) + sum_squared_error(y_right)

                if total_error < best.error:
                    best = SplitResult(
                        stump=DecisionStump(
                            feature_index=feature_index,
                            threshold=float(threshold),
                            left_value=float(np.mean(y_left)),
                            right_value=float(np.mean(y_right)),
                        ),
                        error=total_error,
                        found=True,
                    )

        if not best.found:
            logger.debug(
                f"No threshold separates {n_samples} rows on any of "
                f"{n_features} features; using zero stump"
            )

        return best

    def fit(self, X: np.ndarray, y: np.ndarray) -> DecisionStump:
        """Fit a decision stump to (X, y)."""
        return self.find_best_split(X, y).stump
