"""Randomized accuracy trials for the HyperLogLog estimator.

Each trial feeds ``cardinality`` distinct random keys into a fresh estimator
and records the relative error of its estimate. Over many trials the error
should mostly stay within a few multiples of the theoretical standard error
1.04/sqrt(m).
"""

from __future__ import annotations

import logging
import math
import random
import uuid
from pathlib import Path

import pandas as pd

from hllcount.sketching.hyperloglog import HyperLogLog, standard_error, validate_precision

logger = logging.getLogger(__name__)

TRIAL_COLUMNS = ["trial", "precision", "cardinality", "estimate", "relative_error"]

# Trials whose |relative error| is within this many standard errors count as in bound.
BOUND_SIGMAS = 3.0


def _random_keys(rng: random.Random, count: int) -> list[str]:
    seen: set[str] = set()
    keys: list[str] = []
    while len(keys) < count:
        key = str(uuid.UUID(int=rng.getrandbits(128), version=4))
        if key not in seen:
            seen.add(key)
            keys.append(key)
    return keys


def run_trials(
    precision: int,
    cardinality: int,
    trials: int,
    seed: int | None = None,
) -> pd.DataFrame:
    """Estimate the cardinality of ``trials`` independent random key sets.

    Args:
        precision: Estimator precision (4-16).
        cardinality: Number of distinct keys per trial.
        trials: Number of independent trials.
        seed: Seed for the key generator. None draws fresh randomness.

    Returns:
        One row per trial with columns trial, precision, cardinality,
        estimate and relative_error, where relative_error is
        (estimate - cardinality) / cardinality.

    Raises:
        ValueError: If cardinality or trials is not positive, or precision
            is outside [4, 16].
    """
    validate_precision(precision)
    if cardinality <= 0:
        raise ValueError(f"cardinality must be positive, got {cardinality}")
    if trials <= 0:
        raise ValueError(f"trials must be positive, got {trials}")

    rng = random.Random(seed)
    rows = []
    for trial in range(trials):
        hll = HyperLogLog(precision=precision)
        for key in _random_keys(rng, cardinality):
            hll.update(key)
        estimate = hll.estimate()
        rows.append(
            {
                "trial": trial,
                "precision": precision,
                "cardinality": cardinality,
                "estimate": estimate,
                "relative_error": (estimate - cardinality) / cardinality,
            }
        )
        logger.debug(
            "Trial %d: precision=%d n=%d estimate=%.1f",
            trial, precision, cardinality, estimate,
        )

    return pd.DataFrame(rows, columns=TRIAL_COLUMNS)


def summarize(trials: pd.DataFrame) -> pd.DataFrame:
    """Aggregate trial rows per (precision, cardinality).

    Returns:
        Columns precision, cardinality, trials, mean_estimate,
        mean_relative_error, rmse, standard_error and within_bound (the
        fraction of trials whose |relative error| is at most three standard
        errors).
    """
    frame = trials.copy()
    frame["standard_error"] = frame["precision"].map(standard_error)
    frame["within_bound"] = frame["relative_error"].abs() <= BOUND_SIGMAS * frame["standard_error"]

    summary = (
        frame.groupby(["precision", "cardinality"])
        .agg(
            trials=("trial", "count"),
            mean_estimate=("estimate", "mean"),
            mean_relative_error=("relative_error", "mean"),
            rmse=("relative_error", lambda errors: math.sqrt((errors ** 2).mean())),
            standard_error=("standard_error", "first"),
            within_bound=("within_bound", "mean"),
        )
        .reset_index()
    )
    return summary


def plot_accuracy(trials: pd.DataFrame, path: str | Path) -> Path:
    """Plot relative error per trial against the standard-error band.

    Args:
        trials: Rows from run_trials(), possibly concatenated.
        path: Output PNG path. Parent directories are created automatically.

    Returns:
        The written path.
    """
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    _fig, ax = plt.subplots(figsize=(8, 5))
    groups = list(trials.groupby(["precision", "cardinality"]))
    for position, ((precision, cardinality), group) in enumerate(groups):
        errors = group["relative_error"] * 100
        ax.scatter([position] * len(errors), errors, alpha=0.6, label=f"b={precision}, n={cardinality}")
        sigma = standard_error(precision) * 100
        ax.hlines([-sigma, sigma], position - 0.3, position + 0.3, colors="red", linestyles="--")

    ax.axhline(0, color="black", linewidth=0.8)
    ax.set_xticks(range(len(groups)))
    ax.set_xticklabels([f"b={p}\nn={n}" for (p, n), _ in groups])
    ax.set_ylabel("Relative error (%)")
    ax.set_title("HyperLogLog relative error per trial (dashed: ±1.04/√m)")

    plt.tight_layout()
    plt.savefig(path, dpi=150)
    plt.close()
    logger.info("Wrote accuracy plot to %s", path)
    return path
