"""
Helpers for validating metric value changes during tests.

Counters in GeoLink are labelled, so pass the labelled child:

    with metric_delta(METRICS["resolutions_total"].labels(outcome="success")):
        await resolver.resolve(url)
"""

from contextlib import contextmanager


def _current_value(metric) -> float:
    if not hasattr(metric, "_value"):
        raise ValueError(f"Metric {metric} doesn't have a _value attribute (pass a labelled child)")
    return metric._value.get()


@contextmanager
def metric_delta(metric, expected_delta=1):
    """
    Context manager asserting a counter changes by exactly ``expected_delta``.

    Args:
        metric: Prometheus counter (or labelled child)
        expected_delta: Expected change in metric value
    """
    initial_value = _current_value(metric)

    yield

    final_value = _current_value(metric)
    actual_delta = final_value - initial_value

    if actual_delta != expected_delta:
        raise AssertionError(
            f"Expected metric to change by {expected_delta}, "
            f"but it changed by {actual_delta} "
            f"(from {initial_value} to {final_value})"
        )


@contextmanager
def metric_increases(metric):
    """Context manager asserting a counter increases by any positive amount."""
    initial_value = _current_value(metric)

    yield

    final_value = _current_value(metric)
    actual_delta = final_value - initial_value

    if actual_delta <= 0:
        raise AssertionError(
            f"Expected metric to increase, but it changed by {actual_delta} (from {initial_value} to {final_value})"
        )


def get_histogram_count(histogram):
    """Get the current observation count for an unlabelled histogram."""
    for metric_family in histogram.collect():
        for sample in metric_family.samples:
            if sample.name.endswith("_count"):
                return sample.value
    return 0.0


@contextmanager
def histogram_observes(histogram, min_observations=1):
    """
    Context manager to validate histogram observations.

    Usage:
        with histogram_observes(METRICS["resolution_duration_seconds"]):
            await resolver.resolve(url)
    """
    initial_count = get_histogram_count(histogram)

    yield

    final_count = get_histogram_count(histogram)
    actual_observations = final_count - initial_count

    if actual_observations < min_observations:
        raise AssertionError(
            f"Expected at least {min_observations} histogram observations, "
            f"but got {actual_observations} "
            f"(count went from {initial_count} to {final_count})"
        )
