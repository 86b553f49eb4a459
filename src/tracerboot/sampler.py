"""Sampler construction from a sampling-rate string."""

import logging
import math
import re

from opentelemetry.sdk.trace.sampling import (
    ALWAYS_ON,
    ParentBased,
    Sampler,
    TraceIdRatioBased,
)

logger = logging.getLogger(__name__)

# Leading float; trailing text is ignored
_RATE_PATTERN = re.compile(
    r"\s*[+-]?(?:inf(?:inity)?|nan|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)",
    re.IGNORECASE,
)


def parse_rate(sampling_rate: str) -> float:
    """Parse the leading floating-point number of a rate string.

    ``"0.5x"`` parses as 0.5.

    Raises:
        ValueError: If the string does not start with a number.
    """
    match = _RATE_PATTERN.match(sampling_rate)
    if match is None:
        raise ValueError(f"no number at start of {sampling_rate!r}")
    return float(match.group())


def build_sampler(sampling_rate: str) -> Sampler:
    """Build the sampler for the tracer provider.

    An empty rate samples everything. A rate with no leading number, or
    NaN, is logged and also samples everything. A parsed rate is clamped
    to [0.0, 1.0] and applied to root spans only; children follow a
    sampled parent.

    Args:
        sampling_rate: Rate as read from configuration, possibly empty.

    Returns:
        ALWAYS_ON, or ParentBased(TraceIdRatioBased(rate)).
    """
    if not sampling_rate:
        return ALWAYS_ON

    try:
        rate = parse_rate(sampling_rate)
    except ValueError as e:
        logger.warning(f"Invalid TracerSamplingRate, using AlwaysSample: {e}")
        return ALWAYS_ON

    if math.isnan(rate):
        logger.warning(
            f"Invalid TracerSamplingRate, using AlwaysSample: {sampling_rate!r}"
        )
        return ALWAYS_ON

    rate = min(max(rate, 0.0), 1.0)
    logger.info(f"Using TraceIdRatioBased sampler with rate: {rate:f}")
    return ParentBased(TraceIdRatioBased(rate))
