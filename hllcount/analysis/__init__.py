"""Accuracy analysis for the cardinality estimator.

Public API:
    run_trials: repeated randomized estimates as a DataFrame
    summarize: per-configuration error statistics
    plot_accuracy: relative error chart (matplotlib)
"""

from hllcount.analysis.accuracy import plot_accuracy, run_trials, standard_error, summarize

__all__ = [
    "plot_accuracy",
    "run_trials",
    "standard_error",
    "summarize",
]
