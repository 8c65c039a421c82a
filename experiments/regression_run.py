"""
Regression experiment on the y = x * sin(x) toy problem.

Demonstrates stump boosting with squared-error loss: prints the fitted model,
compares predictions with the true curve, and plots learning curves.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from sklearn.tree import DecisionTreeRegressor
from sklearn.metrics import mean_squared_error

from stumpboost.core import GradientBoostingRegressor

OUTPUT_DIR = Path(__file__).parent

# Set style
plt.style.use('seaborn-v0_8-darkgrid')


def target(x):
    return x * np.sin(x)


def load_data():
    """Ten training points on x = 1..10 and a dense validation grid."""
    x_train = np.arange(1.0, 11.0)
    X_train = x_train.reshape(-1, 1)
    y_train = target(x_train)

    x_val = np.linspace(1.0, 10.0, 200)
    X_val = x_val.reshape(-1, 1)
    y_val = target(x_val)

    return X_train, X_val, y_train, y_val


def baseline_comparison(X_train, X_val, y_train, y_val):
    """Baseline: a single sklearn stump."""
    print("\n" + "="*60)
    print("Baseline: Single Decision Stump")
    print("="*60)

    dt = DecisionTreeRegressor(max_depth=1, random_state=42)
    dt.fit(X_train, y_train)

    train_mse = mean_squared_error(y_train, dt.predict(X_train))
    val_mse = mean_squared_error(y_val, dt.predict(X_val))

    print(f"Train MSE: {train_mse:.6f}")
    print(f"Val MSE:   {val_mse:.6f}")

    return train_mse, val_mse


def fit_reference_model(X_train, y_train):
    """100 stumps at learning rate 0.1; print the model and three predictions."""
    print("\n" + "="*60)
    print("Reference Model: n_estimators=100, learning_rate=0.1")
    print("="*60)

    model = GradientBoostingRegressor(n_estimators=100, learning_rate=0.1)
    model.fit(X_train, y_train)

    print(f"Model Details: {model!r}")

    X_test = np.array([[2.5], [5.5], [8.5]])
    predictions = model.predict(X_test)

    print("\nTest Data Predictions:")
    for row, p in zip(X_test, predictions):
        print(f"- Input: {row[0]:.1f}, Prediction: {p:.4f}, Actual: {target(row[0]):.4f}")

    model.stumps_frame().to_csv(OUTPUT_DIR / 'regression_stumps.csv')
    print("\nSaved stump table: regression_stumps.csv")

    return model


def experiment_learning_rate(X_train, X_val, y_train, y_val):
    """Experiment: effect of learning rate (shrinkage)."""
    print("\n" + "="*60)
    print("Experiment: Effect of learning_rate")
    print("="*60)

    learning_rates = [0.05, 0.1, 0.5, 1.0]
    results = []

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    for lr in learning_rates:
        print(f"\nFitting with learning_rate={lr}...")

        gbr = GradientBoostingRegressor(n_estimators=100, learning_rate=lr)
        gbr.fit(X_train, y_train, X_val=X_val, y_val=y_val)

        val_mse = mean_squared_error(y_val, gbr.predict(X_val))
        print(f"Val MSE: {val_mse:.6f}")

        results.append({
            'learning_rate': lr,
            'final_train_mse': gbr.train_scores_[-1],
            'val_mse': val_mse
        })

        axes[0].plot(gbr.train_scores_, label=f'lr={lr}', linewidth=2)
        axes[1].plot(X_val[:, 0], gbr.predict(X_val), label=f'lr={lr}', linewidth=1.5)

    axes[0].set_xlabel('Iteration')
    axes[0].set_ylabel('Train loss')
    axes[0].set_yscale('log')
    axes[0].set_title('Training Loss by Learning Rate')
    axes[0].legend()

    axes[1].plot(X_val[:, 0], y_val, 'k--', label='x sin(x)', linewidth=2)
    axes[1].scatter(X_train[:, 0], y_train, color='k', zorder=3, label='train')
    axes[1].set_xlabel('x')
    axes[1].set_ylabel('y')
    axes[1].set_title('Fitted Step Functions')
    axes[1].legend()

    plt.tight_layout()
    plt.savefig(OUTPUT_DIR / 'regression_learning_rate.png', dpi=150)
    print("\nSaved plot: regression_learning_rate.png")

    return pd.DataFrame(results)


def main():
    """Run all regression experiments."""
    print("="*60)
    print("Stump Boosting Regression Experiments")
    print("y = x * sin(x)")
    print("="*60)

    X_train, X_val, y_train, y_val = load_data()

    baseline_comparison(X_train, X_val, y_train, y_val)
    fit_reference_model(X_train, y_train)

    results_lr = experiment_learning_rate(X_train, X_val, y_train, y_val)
    results_lr.to_csv(OUTPUT_DIR / 'regression_learning_rate_results.csv', index=False)

    print("\n" + "="*60)
    print("Results Summary")
    print("="*60)
    print(results_lr.to_string(index=False))


if __name__ == "__main__":
    main()
