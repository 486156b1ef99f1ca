"""
Prometheus metrics for ServiceAgent.

Metrics live in the default ``prometheus_client`` registry; the hosting
web process is responsible for exposing them.
"""

import time

from prometheus_client import Counter, Histogram

from .logging import get_logger

logger = get_logger(__name__)

# Lead scoring
LEADS_SCORED = Counter(
    "serviceagent_leads_scored_total",
    "Total number of leads scored",
    ["score_range"],
)
SCORING_RULES_FIRED = Counter(
    "serviceagent_scoring_rules_fired_total",
    "Total number of scoring rules that contributed points",
    ["pass_type"],
)
SCORING_DURATION = Histogram(
    "serviceagent_scoring_duration_seconds",
    "Time spent scoring leads",
    ["operation", "status"],
)

# Plan resolution
PLAN_ACCESS_CHECKS = Counter(
    "serviceagent_plan_access_checks_total",
    "Plan access decisions",
    ["result"],
)
PLAN_CACHE_LOOKUPS = Counter(
    "serviceagent_plan_cache_lookups_total",
    "Plan cache lookups by outcome",
    ["outcome"],
)
PLAN_FETCH_FAILURES = Counter(
    "serviceagent_plan_fetch_failures_total",
    "Failed subscription lookups against the profile store",
)


class MetricsTimer:
    """
    Context manager for timing operations and reporting to Prometheus.

    Usage:
        with MetricsTimer(SCORING_DURATION, operation="score_lead"):
            ...
    """

    def __init__(self, metric, **labels):
        self.metric = metric
        self.labels = labels
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.time() - self.start_time
        if exc_type is not None:
            self.labels["status"] = "error"
            logger.warning(
                f"Operation failed after {duration:.4f}s",
                extra={"duration": duration, "error": str(exc_val), **self.labels},
            )
        else:
            self.labels["status"] = "success"

        try:
            self.metric.labels(**self.labels).observe(duration)
        except (ValueError, AttributeError) as e:
            logger.error(f"Failed to record metric: {e}", extra={"error": str(e)})


def record_metric(metric, value=1, **labels):
    """
    Record a counter increment, logging instead of raising on bad labels.

    Args:
        metric: The counter to increment
        value: The amount to add
        **labels: Labels to apply to the metric
    """
    try:
        if labels:
            metric.labels(**labels).inc(value)
        else:
            metric.inc(value)
    except (ValueError, AttributeError) as e:
        logger.error(
            f"Failed to record metric: {e}",
            extra={"metric": getattr(metric, "_name", str(metric)), "error": str(e)},
        )


def get_score_range(score: float) -> str:
    """Bucket a score for the ``score_range`` label."""
    if score >= 80:
        return "high"
    elif score >= 50:
        return "medium"
    elif score >= 30:
        return "low"
    else:
        return "very_low"
