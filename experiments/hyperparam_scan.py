"""
Hyperparameter scan for stump boosting.

Grid search over n_estimators and learning_rate on a synthetic regression
problem; saves results and a plot of each hyperparameter's effect.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from itertools import product
from sklearn.datasets import make_regression
from sklearn.model_selection import train_test_split

from stumpboost.core import GradientBoostingRegressor
from stumpboost.utils import compute_metrics_regression

OUTPUT_DIR = Path(__file__).parent


def prepare_regression_data():
    """Synthetic regression data split 80/20."""
    print("Generating regression data...")
    X, y = make_regression(
        n_samples=200, n_features=5, n_informative=3, noise=10.0, random_state=42
    )
    return train_test_split(X, y, test_size=0.2, random_state=42)


def regression_grid_search():
    """Grid search for regression."""
    print("\n" + "="*60)
    print("Hyperparameter Grid Search - Regression")
    print("="*60)

    X_train, X_test, y_train, y_test = prepare_regression_data()

    # Define grid
    param_grid = {
        'n_estimators': [10, 50, 100],
        'learning_rate': [0.05, 0.1, 0.3, 1.0],
    }

    results = []
    total_combinations = np.prod([len(v) for v in param_grid.values()])

    print(f"\nTotal combinations: {total_combinations}")
    print("Running grid search...")

    for combo_idx, (n_est, lr) in enumerate(
        product(param_grid['n_estimators'], param_grid['learning_rate']), start=1
    ):
        print(f"\n[{combo_idx}/{total_combinations}] Testing: n_est={n_est}, lr={lr}")

        gbr = GradientBoostingRegressor(n_estimators=n_est, learning_rate=lr)
        gbr.fit(X_train, y_train)

        train_metrics = compute_metrics_regression(y_train, gbr.predict(X_train))
        test_metrics = compute_metrics_regression(y_test, gbr.predict(X_test))

        results.append({
            'n_estimators': n_est,
            'learning_rate': lr,
            'train_mse': train_metrics['mse'],
            'test_mse': test_metrics['mse'],
            'test_r2': test_metrics['r2']
        })

        print(f"  Train MSE: {train_metrics['mse']:.6f}, Test MSE: {test_metrics['mse']:.6f}")

    df_results = pd.DataFrame(results).sort_values('test_mse')

    output_path = OUTPUT_DIR / 'regression_grid_search.csv'
    df_results.to_csv(output_path, index=False)
    print(f"\nSaved results to: {output_path}")

    print("\n" + "="*60)
    print("Top 5 Configurations (by Test MSE)")
    print("="*60)
    print(df_results.head(5).to_string(index=False))

    return df_results


def plot_hyperparameter_effects(df_reg):
    """Mean and spread of test MSE for each hyperparameter value."""
    hyperparams = ['n_estimators', 'learning_rate']
    fig, axes = plt.subplots(1, len(hyperparams), figsize=(12, 4))

    for ax, param in zip(axes, hyperparams):
        grouped = df_reg.groupby(param)['test_mse'].agg(['mean', 'std'])

        ax.errorbar(
            grouped.index, grouped['mean'], yerr=grouped['std'],
            marker='o', capsize=5, linewidth=2, markersize=8
        )
        ax.set_xlabel(param)
        ax.set_ylabel('Test MSE')
        ax.set_title(f'Regression: {param} Effect')
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(OUTPUT_DIR / 'hyperparameter_effects.png', dpi=150)
    print("\nSaved plot: hyperparameter_effects.png")


def main():
    """Run hyperparameter scan."""
    print("="*60)
    print("Hyperparameter Scan")
    print("="*60)

    df_reg = regression_grid_search()
    plot_hyperparameter_effects(df_reg)

    print("\nBest Configuration:")
    print(df_reg.iloc[0].to_string())


if __name__ == "__main__":
    main()
