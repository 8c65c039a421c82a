"""
Unit tests for stump boosting implementation.

Tests numerical correctness of:
- Residual computation
- Model fitting and prediction
- Guarded fits on malformed input and the degenerate fallback
- Determinism
"""

import numpy as np
import pytest
from sklearn.datasets import make_regression
from sklearn.model_selection import train_test_split

import sys
from pathlib import Path

# Add src directory to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from stumpboost import BoostingEnsemble
from stumpboost.core import FitStatus, GradientBoostingRegressor
from stumpboost.stump import DecisionStump
from stumpboost.utils import mse_loss, mse_negative_gradient


# =========================
# Test Loss Functions
# =========================

def test_mse_negative_gradient():
    """Test MSE pseudo-residuals match theoretical formula."""
    y_true = np.array([1.0, 2.0, 3.0, 4.0])
    y_pred = np.array([1.5, 1.8, 3.2, 3.5])

    residuals = mse_negative_gradient(y_true, y_pred)
    expected = y_true - y_pred

    np.testing.assert_allclose(residuals, expected, rtol=1e-10)


def test_mse_loss_known_value():
    y_true = np.array([1.0, 2.0, 3.0])
    y_pred = np.array([2.0, 2.0, 2.0])

    assert mse_loss(y_true, y_pred) == pytest.approx(0.5 * 2.0 / 3.0)


# =========================
# Test GradientBoostingRegressor
# =========================

def test_linear_single_round():
    """One unshrunk round on y = x moves predictions towards the targets."""
    X = [[1.0], [2.0], [3.0], [4.0], [5.0]]
    y = [1.0, 2.0, 3.0, 4.0, 5.0]

    gbr = GradientBoostingRegressor(n_estimators=1, learning_rate=1.0)
    gbr.fit(X, y)

    assert gbr.initial_prediction == pytest.approx(3.0)
    assert len(gbr.stumps) == 1

    stump = gbr.stumps[0]
    assert stump.left_value < 0.0 < stump.right_value
    assert gbr.initial_prediction + stump.left_value < 3.0 < gbr.initial_prediction + stump.right_value

    pred = gbr.predict([[1.0]])
    assert abs(pred[0] - 1.0) < abs(3.0 - 1.0)
    assert pred[0] == pytest.approx(1.5)


def test_regressor_single_round_matches_stump_on_residuals():
    """With n_estimators=1 and learning_rate=1.0, prediction is mean + stump."""
    X, y = make_regression(n_samples=50, n_features=3, random_state=42)

    gbr = GradientBoostingRegressor(n_estimators=1, learning_rate=1.0)
    gbr.fit(X, y)

    stump = gbr.stumps[0]
    expected = np.mean(y) + stump.predict_batch(X)
    np.testing.assert_allclose(gbr.predict(X), expected, rtol=1e-12)


def test_regressor_determinism():
    """Same inputs give identical results."""
    X, y = make_regression(n_samples=60, n_features=4, noise=5.0, random_state=123)

    pred1 = GradientBoostingRegressor(n_estimators=10).fit(X, y).predict(X)
    pred2 = GradientBoostingRegressor(n_estimators=10).fit(X, y).predict(X)

    np.testing.assert_array_equal(pred1, pred2)


def test_regressor_learning_rate_effect():
    """Test that lower learning_rate reduces per-iteration impact."""
    X, y = make_regression(n_samples=60, n_features=4, random_state=42)

    gbr_high = GradientBoostingRegressor(n_estimators=5, learning_rate=1.0).fit(X, y)
    gbr_low = GradientBoostingRegressor(n_estimators=5, learning_rate=0.1).fit(X, y)

    mse_high = np.mean((y - gbr_high.predict(X)) ** 2)
    mse_low = np.mean((y - gbr_low.predict(X)) ** 2)

    assert mse_high < mse_low


def test_regressor_validation_tracking():
    """Test that validation scores are tracked correctly."""
    X, y = make_regression(n_samples=80, n_features=4, random_state=42)
    X_train, X_val, y_train, y_val = train_test_split(
        X, y, test_size=0.3, random_state=42
    )

    gbr = GradientBoostingRegressor(n_estimators=10)
    gbr.fit(X_train, y_train, X_val=X_val, y_val=y_val)

    assert len(gbr.train_scores_) == 10
    assert len(gbr.val_scores_) == 10
    assert gbr.val_scores_[-1] == pytest.approx(mse_loss(y_val, gbr.predict(X_val)))


def test_validation_length_mismatch_raises():
    X, y = make_regression(n_samples=30, n_features=2, random_state=0)

    gbr = GradientBoostingRegressor(n_estimators=2)
    with pytest.raises(ValueError):
        gbr.fit(X, y, X_val=X[:5], y_val=y[:4])


def test_boosting_ensemble_alias():
    assert BoostingEnsemble is GradientBoostingRegressor


# =========================
# Test Guards and Fallbacks
# =========================

@pytest.mark.parametrize(
    "X, y",
    [
        ([], []),
        ([], [1.0, 2.0]),
        ([[1.0], [2.0]], []),
        ([[1.0], [2.0]], [1.0, 2.0, 3.0]),
    ],
)
def test_fit_guard_is_noop(X, y):
    gbr = GradientBoostingRegressor(n_estimators=3, learning_rate=0.5)
    result = gbr.fit(X, y)

    assert result is gbr
    assert gbr.initial_prediction == 0.0
    assert gbr.stumps == ()
    assert gbr.fit_status_ is FitStatus.UNTRAINED
    assert gbr.last_fit_status_ is FitStatus.SKIPPED
    assert not gbr.is_fitted


def test_fit_guard_keeps_trained_state():
    X = [[1.0], [2.0], [3.0]]
    y = [1.0, 2.0, 4.0]

    gbr = GradientBoostingRegressor(n_estimators=4).fit(X, y)
    f0 = gbr.initial_prediction
    stumps = gbr.stumps
    dump = gbr.to_dict()

    gbr.fit(X, [1.0, 2.0])

    assert gbr.initial_prediction == f0
    assert gbr.stumps == stumps
    assert gbr.fit_status_ is FitStatus.TRAINED
    assert gbr.last_fit_status_ is FitStatus.SKIPPED
    assert gbr.to_dict() == dump


def test_single_row_fit_uses_zero_stumps():
    gbr = GradientBoostingRegressor(n_estimators=3, learning_rate=0.1)
    gbr.fit([[5.0]], [3.0])

    assert gbr.initial_prediction == pytest.approx(3.0)
    assert gbr.stumps == (DecisionStump(),) * 3
    assert gbr.fit_status_ is FitStatus.DEGENERATE
    assert gbr.n_degenerate_rounds_ == 3
    np.testing.assert_allclose(gbr.predict([[5.0], [-2.0]]), [3.0, 3.0])


def test_untrained_predicts_zero():
    gbr = GradientBoostingRegressor(n_estimators=5)

    assert gbr.fit_status_ is FitStatus.UNTRAINED
    np.testing.assert_array_equal(gbr.predict([[1.0, 2.0], [3.0, 4.0]]), [0.0, 0.0])


def test_untrained_predicts_zero_for_featureless_rows():
    """An untrained model splits on no column, so rows may be empty."""
    gbr = GradientBoostingRegressor(n_estimators=2)

    np.testing.assert_array_equal(gbr.predict([[], []]), [0.0, 0.0])
    np.testing.assert_array_equal(gbr.predict(np.zeros((3, 0))), [0.0, 0.0, 0.0])


def test_trained_rejects_featureless_rows():
    gbr = GradientBoostingRegressor(n_estimators=2).fit([[1.0], [2.0]], [1.0, 2.0])

    with pytest.raises(ValueError):
        gbr.predict([[], []])


def test_fit_rejects_featureless_rows():
    gbr = GradientBoostingRegressor(n_estimators=2)

    with pytest.raises(ValueError):
        gbr.fit([[], []], [1.0, 2.0])


@pytest.mark.parametrize(
    "n_estimators, learning_rate",
    [(0, 0.1), (-3, 0.1), (2.5, 0.1), (True, 0.1), (10, float("nan")), (10, "0.1")],
)
def test_invalid_hyperparameters_raise(n_estimators, learning_rate):
    with pytest.raises(ValueError):
        GradientBoostingRegressor(n_estimators=n_estimators, learning_rate=learning_rate)


def test_ragged_matrix_raises():
    gbr = GradientBoostingRegressor(n_estimators=2)

    with pytest.raises(ValueError):
        gbr.fit([[1.0, 2.0], [3.0]], [1.0, 2.0])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
