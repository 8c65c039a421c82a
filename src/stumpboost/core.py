"""
Gradient boosting over decision stumps.

Implements Algorithm 10.3 (Forward Stagewise Additive Modelling) with squared-error
loss, the special case of Algorithm 10.4 (Gradient Tree Boosting) where every tree
has a single split, from "The Elements of Statistical Learning"
(Hastie, Tibshirani, Friedman, 2009).

References:
- Hastie, T., Tibshirani, R., & Friedman, J. (2009). The Elements of Statistical
  Learning (2nd ed.). Springer. Chapter 10.
- Friedman, J. H. (2001). Greedy function approximation: A gradient boosting machine.
  Annals of Statistics, 29(5), 1189-1232.
"""

from enum import Enum
from typing import Iterator, List, Optional, Tuple
import logging
import math
import numbers
import pprint

import numpy as np
import pandas as pd

from .stump import DecisionStump, StumpFitter
from .utils import as_feature_matrix, as_target_vector, mse_loss, mse_negative_gradient


class FitStatus(Enum):
    """
    Outcome of a call to `fit`.

    `fit_status_` holds the training state of the model (never SKIPPED);
    `last_fit_status_` holds the outcome of the most recent call.
    """

    UNTRAINED = "untrained"
    TRAINED = "trained"
    # Empty or length-mismatched input; no training happened.
    SKIPPED = "skipped"
    # Rounds ran, but no threshold ever separated the rows.
    DEGENERATE = "degenerate"


class GradientBoostingBase:
    """
    Base class for stump boosting models.

    Holds the hyperparameters, the fitted state and the diagnostic dump of the
    model. Only a fixed learning rate is used for regularisation.
    """

    def __init__(
        self,
        n_estimators: int = 100,
        learning_rate: float = 0.1,
        verbose: bool = False
    ):
        """
        Args:
            n_estimators: Number of boosting stages (M). Must be a positive integer.
            learning_rate: Shrinkage parameter ν, conventionally in (0, 1].
                Multiplies stump contributions.
            verbose: Enable logging output.
        """
        if isinstance(n_estimators, bool) or not isinstance(n_estimators, numbers.Integral):
            raise ValueError(f"n_estimators must be an integer, got {n_estimators!r}")
        if n_estimators < 1:
            raise ValueError(f"n_estimators must be positive, got {n_estimators}")
        if (
            isinstance(learning_rate, bool)
            or not isinstance(learning_rate, numbers.Real)
            or not math.isfinite(learning_rate)
        ):
            raise ValueError(f"learning_rate must be a finite number, got {learning_rate!r}")

        self.n_estimators = int(n_estimators)
        self.learning_rate = float(learning_rate)
        self.verbose = verbose

        # Model state
        self.f0_: float = 0.0  # Initial constant prediction
        self.estimators_: List[DecisionStump] = []  # Weak learners, in fit order
        self.fit_status_: FitStatus = FitStatus.UNTRAINED
        self.last_fit_status_: FitStatus = FitStatus.UNTRAINED
        self.n_degenerate_rounds_: int = 0

        # Training history of the most recent fit
        self.train_scores_: List[float] = []
        self.val_scores_: List[float] = []

        self._fitter = StumpFitter()

        # Setup logging
        self.logger = logging.getLogger(__name__)
        if self.verbose:
            logging.basicConfig(level=logging.INFO)

    @property
    def initial_prediction(self) -> float:
        return self.f0_

    @property
    def stumps(self) -> Tuple[DecisionStump, ...]:
        return tuple(self.estimators_)

    @property
    def is_fitted(self) -> bool:
        return len(self.estimators_) > 0

    def to_dict(self) -> dict:
        """
        Structured dump of hyperparameters, initial prediction and all stumps.

        `fit_status` is the training state, which a skipped fit does not change.
        """
        return {
            "n_estimators": self.n_estimators,
            "learning_rate": self.learning_rate,
            "initial_prediction": self.f0_,
            "fit_status": self.fit_status_.value,
            "stumps": [stump.to_dict() for stump in self.estimators_],
        }

    def stumps_frame(self) -> pd.DataFrame:
        """One row per stump in fit order."""
        columns = ["feature_index", "threshold", "left_value", "right_value"]
        frame = pd.DataFrame(
            [stump.to_dict() for stump in self.estimators_], columns=columns
        )
        frame.index.name = "round"
        return frame

    def __repr__(self) -> str:
        return f"{type(self).__name__}(\n{pprint.pformat(self.to_dict(), indent=2, sort_dicts=False)}\n)"


class GradientBoostingRegressor(GradientBoostingBase):
    """
    Gradient stump boosting for regression (squared-error loss).

    Implements:
    1. Initialisation: f_0(x) = argmin_γ Σ L(y_i, γ) = mean(y).
    2. For m = 1 to M:
       a. Compute residuals: r_im = y_i - f_{m-1}(x_i).
       b. Fit a decision stump to {(x_i, r_im)}; its two leaf values are the
          residual means of each side of the split.
       c. Update: f_m(x) = f_{m-1}(x) + ν * stump_m(x).

    Calling `fit` again on a fitted model appends another M stumps and
    replaces f_0; it does not start from scratch. Build a new model for a
    clean retrain.
    """

    def fit(
        self,
        X: np.ndarray,
        y: np.ndarray,
        X_val: Optional[np.ndarray] = None,
        y_val: Optional[np.ndarray] = None
    ) -> "GradientBoostingRegressor":
        """
        Fit gradient boosting regressor.

        Empty X or y, or a length mismatch between them, skips training and
        leaves the model untouched; only `last_fit_status_` becomes
        `FitStatus.SKIPPED`.

        Args:
            X: Training features, shape (n_samples, n_features).
            y: Training targets, shape (n_samples,).
            X_val: Optional validation features for tracking generalisation.
            y_val: Optional validation targets.

        Returns:
            self
        """
        if len(X) == 0 or len(y) == 0 or len(X) != len(y):
            self.logger.warning(
                f"Skipping fit: got {len(X)} feature rows and {len(y)} targets"
            )
            self.last_fit_status_ = FitStatus.SKIPPED
            return self

        X = as_feature_matrix(X)
        y = as_target_vector(y)

        track_val = X_val is not None and y_val is not None
        if track_val:
            X_val = as_feature_matrix(X_val)
            y_val = as_target_vector(y_val)
            if X_val.shape[0] != y_val.shape[0]:
                raise ValueError(
                    f"X_val has {X_val.shape[0]} rows but y_val has {y_val.shape[0]} values"
                )
            if X_val.shape[1] < X.shape[1]:
                raise ValueError(
                    f"X_val has {X_val.shape[1]} features, expected {X.shape[1]}"
                )

        n_samples = X.shape[0]

        # Step 1: Initialise f_0(x) = mean(y)
        self.f0_ = float(np.mean(y))
        F_train = np.full(n_samples, self.f0_)  # Current predictions
        F_val = np.full(X_val.shape[0], self.f0_) if track_val else None

        self.train_scores_ = []
        self.val_scores_ = []
        degenerate_rounds = 0

        if self.verbose:
            self.logger.info(f"Initial f_0 = {self.f0_:.6f}")

        # Step 2: Boosting loop
        for m in range(self.n_estimators):
            # (a) Residuals of the current ensemble
            residuals = mse_negative_gradient(y, F_train)

            # (b) Fit stump to residuals
            split = self._fitter.find_best_split(X, residuals)
            stump = split.stump
            if not split.found:
                degenerate_rounds += 1

            # (c) Update predictions with shrinkage
            F_train += self.learning_rate * stump.predict_batch(X)
            self.estimators_.append(stump)

            # Track scores
            train_mse = mse_loss(y, F_train)
            self.train_scores_.append(train_mse)

            if track_val:
                F_val += self.learning_rate * stump.predict_batch(X_val)
                val_mse = mse_loss(y_val, F_val)
                self.val_scores_.append(val_mse)

                if self.verbose and (m + 1) % 10 == 0:
                    self.logger.info(
                        f"Iteration {m+1}/{self.n_estimators}: "
                        f"train_mse={train_mse:.6f}, val_mse={val_mse:.6f}"
                    )
            elif self.verbose and (m + 1) % 10 == 0:
                self.logger.info(
                    f"Iteration {m+1}/{self.n_estimators}: train_mse={train_mse:.6f}"
                )

        self.n_degenerate_rounds_ += degenerate_rounds
        if degenerate_rounds == self.n_estimators:
            self.logger.warning(
                "No split separates the training rows; every stump is the zero stump"
            )
            self.fit_status_ = FitStatus.DEGENERATE
        else:
            self.fit_status_ = FitStatus.TRAINED
        self.last_fit_status_ = self.fit_status_

        return self

    def _check_columns(self, X: np.ndarray) -> None:
        if not self.estimators_:
            return
        needed = max(stump.feature_index for stump in self.estimators_) + 1
        if X.shape[1] < needed:
            raise ValueError(
                f"X has {X.shape[1]} features but the model splits on feature {needed - 1}"
            )

    def _predict_raw(self, X: np.ndarray, up_to_iteration: Optional[int] = None) -> np.ndarray:
        """
        Predictions using the first stumps only.

        Args:
            X: Features, shape (n_samples, n_features).
            up_to_iteration: Use only first k estimators (for staged predictions).

        Returns:
            Predictions, shape (n_samples,).
        """
        if len(X) == 0:
            return np.zeros(0)

        X = as_feature_matrix(X, allow_empty_columns=True)
        self._check_columns(X)

        n_estimators = up_to_iteration if up_to_iteration is not None else len(self.estimators_)

        F = np.full(X.shape[0], self.f0_)

        for stump in self.estimators_[:n_estimators]:
            F += self.learning_rate * stump.predict_batch(X)

        return F

    def staged_predict(self, X: np.ndarray) -> Iterator[np.ndarray]:
        """Yield predictions after each stump, in fit order; one stage per stump."""
        if len(X) == 0:
            for _ in self.estimators_:
                yield np.zeros(0)
            return

        X = as_feature_matrix(X, allow_empty_columns=True)
        self._check_columns(X)

        F = np.full(X.shape[0], self.f0_)
        for stump in self.estimators_:
            F += self.learning_rate * stump.predict_batch(X)
            yield F.copy()

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Predict regression targets."""
        return self._predict_raw(X)
