"""Encoder thread count detection."""

from __future__ import annotations

import logging

import psutil

LOG = logging.getLogger(__name__)

# libvpx-vp9 stops scaling well beyond this many threads
MAX_ENCODER_THREADS = 16
FALLBACK_THREADS = 1


def get_encoder_thread_count(configured_threads: int | None = None) -> int:
    """
    Return the number of threads to hand to the encoder.

    An explicit positive value wins; otherwise the logical core count reported
    by psutil is used, capped at ``MAX_ENCODER_THREADS``.
    """
    if configured_threads is not None and configured_threads > 0:
        return configured_threads

    try:
        logical_cores = psutil.cpu_count(logical=True) or FALLBACK_THREADS
    except (OSError, AttributeError, ValueError) as e:
        LOG.warning("Failed to detect CPU count with psutil: %s. Using %d thread.", e, FALLBACK_THREADS)
        return FALLBACK_THREADS

    threads = min(logical_cores, MAX_ENCODER_THREADS)
    LOG.debug("Detected %d logical cores, using %d encoder threads", logical_cores, threads)
    return threads
