"""
Gradient boosting over decision stumps, from scratch.

Implements Algorithm 10.3 (Forward Stagewise Additive Modelling) with
squared-error loss and single-split trees, following "The Elements of
Statistical Learning" by Hastie, Tibshirani, and Friedman.
"""

from .core import FitStatus, GradientBoostingRegressor
from .stump import DecisionStump, SplitResult, StumpFitter

BoostingEnsemble = GradientBoostingRegressor

__version__ = "0.1.0"
__all__ = [
    "BoostingEnsemble",
    "DecisionStump",
    "FitStatus",
    "GradientBoostingRegressor",
    "SplitResult",
    "StumpFitter",
]
