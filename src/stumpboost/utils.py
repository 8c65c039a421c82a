"""
Utility functions for stump boosting: squared-error loss, residuals, input
coercion and regression metrics.

References:
- Friedman, J. H. (2001). Greedy function approximation: A gradient boosting machine.
"""

import numpy as np
from sklearn.metrics import mean_squared_error, mean_absolute_error, r2_score


# ===========================
# Loss Functions and Gradients
# ===========================

def mse_loss(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Mean squared error loss: L(y, f) = 0.5 * (y - f)^2."""
    return 0.5 * np.mean((y_true - y_pred) ** 2)


def mse_negative_gradient(y_true: np.ndarray, y_pred: np.ndarray) -> np.ndarray:
    """
    Negative gradient (pseudo-residuals) for MSE loss.

    For L(y, f) = 0.5 * (y - f)^2, the negative gradient is:
    -∂L/∂f = y - f (the residuals).
    """
    return y_true - y_pred


def sum_squared_error(values: np.ndarray) -> float:
    """
    Sum of squared deviations from the mean.

    This is the error of a single constant leaf whose value is the mean of
    `values`, i.e. the smallest squared error any constant can achieve.
    """
    if values.size == 0:
        return 0.0
    return float(np.sum((values - np.mean(values)) ** 2))


# ===========================
# Input Coercion
# ===========================

def as_feature_matrix(X, allow_empty_columns: bool = False) -> np.ndarray:
    """
    Coerce a feature matrix (nested lists or array) to a 2-D float64 array.

    Args:
        X: Rows of numeric features.
        allow_empty_columns: Accept rows with no features, e.g. when scoring
            with a model that splits on no column.

    Raises:
        ValueError: If rows have different lengths, the input is not 2-D, or
            it has no columns and `allow_empty_columns` is False.
    """
    try:
        X = np.asarray(X, dtype=np.float64)
    except ValueError as exc:
        raise ValueError(f"X must be a rectangular numeric matrix: {exc}") from exc
    if X.ndim != 2:
        raise ValueError(f"X must be 2D, got array with ndim={X.ndim}")
    if X.shape[1] == 0 and not allow_empty_columns:
        raise ValueError("X must have at least one feature column")
    return X


def as_target_vector(y) -> np.ndarray:
    """Coerce targets to a 1-D float64 array."""
    y = np.asarray(y, dtype=np.float64)
    if y.ndim != 1:
        raise ValueError(f"y must be 1D, got array with ndim={y.ndim}")
    return y


# ===========================
# Metrics
# ===========================

def compute_metrics_regression(
    y_true: np.ndarray,
    y_pred: np.ndarray
) -> dict:
    """Compute regression metrics."""
    mse = mean_squared_error(y_true, y_pred)
    rmse = np.sqrt(mse)
    mae = mean_absolute_error(y_true, y_pred)

    return {
        "mse": mse,
        "rmse": rmse,
        "mae": mae,
        "r2": r2_score(y_true, y_pred)
    }
