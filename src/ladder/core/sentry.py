from __future__ import annotations

"""
Sentry initialization helpers for the ladder CLIs.

Environment variables (all optional; safe to omit):
- SENTRY_DSN / LADDER_SENTRY_DSN: DSN URL used to enable Sentry.
- SENTRY_ENV / ENV: Environment name (e.g., production, staging). Defaults to development.
- SENTRY_TRACES_SAMPLE_RATE: Float in [0,1] for performance tracing sample rate.
- SENTRY_DEBUG: If set to a truthy value (1/true/yes/on), enables SDK debug output.

Usage:
    from ladder.core.sentry import init_sentry
    init_sentry(context="ladder_record")

Rank conflicts and integrity failures are logged at ERROR, so with the
logging integration attached they arrive in Sentry as events.
"""

import logging
import os
from typing import Iterable, Optional

_LOG = logging.getLogger("ladder.core.sentry")


def _parse_float_env(name: str, default: float) -> float:
    """Parse a float environment variable with a default and clamping.

    Returns `default` if unset or invalid. Values below 0 or above 1 are
    clamped into [0.0, 1.0].
    """
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        val = float(raw)
    except ValueError:
        _LOG.debug(
            "Invalid float for %s: %r; using default=%s", name, raw, default
        )
        return default
    if val < 0.0:
        return 0.0
    if val > 1.0:
        return 1.0
    return val


def _truthy_env(name: str) -> bool:
    return os.getenv(name, "").lower() in {"1", "true", "yes", "on"}


def _first_env(names: Iterable[str]) -> Optional[str]:
    for n in names:
        v = os.getenv(n)
        if v:
            return v
    return None


def _is_valid_dsn(dsn: str) -> bool:
    """Accept http(s) DSNs with a host component."""
    from urllib.parse import urlparse

    try:
        u = urlparse(dsn)
    except ValueError:
        return False
    return (u.scheme in {"http", "https"}) and bool(u.netloc)


def init_sentry(
    *,
    context: str,
    release: Optional[str] = None,
    dsn_envs: Optional[Iterable[str]] = None,
) -> bool:
    """Initialize Sentry best-effort and return whether it initialized.

    - Reads the DSN from the first non-empty env in `dsn_envs` (default:
      ["SENTRY_DSN", "LADDER_SENTRY_DSN"]).
    - Reads environment from SENTRY_ENV or ENV (default: development).
    - Enables LoggingIntegration so ERROR-level logs are captured as events.
    """
    dsn_envs = (
        list(dsn_envs)
        if dsn_envs is not None
        else ["SENTRY_DSN", "LADDER_SENTRY_DSN"]
    )
    dsn = _first_env(dsn_envs)
    if not dsn:
        _LOG.info(
            "Sentry disabled: no DSN configured (checked envs=%s)", list(dsn_envs)
        )
        return False
    dsn = dsn.strip().strip("\"").strip("'")
    if not _is_valid_dsn(dsn):
        _LOG.info("Sentry disabled: DSN appears invalid; check secrets/env")
        return False
    try:
        import sentry_sdk  # type: ignore
        from sentry_sdk.integrations.logging import (
            LoggingIntegration,  # type: ignore
        )
    except ImportError as e:  # pragma: no cover - environment-specific
        _LOG.info("Sentry disabled: sentry_sdk import failed: %s", e)
        return False

    env = (
        os.getenv("SENTRY_ENV")
        or os.getenv("SENTRY_ENVIRONMENT")
        or os.getenv("ENV")
        or "development"
    )
    traces = _parse_float_env("SENTRY_TRACES_SAMPLE_RATE", 0.0)
    debug = _truthy_env("SENTRY_DEBUG")

    logging_integration = LoggingIntegration(
        level=logging.INFO,  # breadcrumb level
        event_level=logging.ERROR,  # event threshold
    )

    sentry_sdk.init(
        dsn=dsn,
        environment=env,
        release=release,
        integrations=[logging_integration],
        traces_sample_rate=traces,
        debug=debug,
    )
    sentry_sdk.set_tag("service", context)
    _LOG.info(
        "Sentry initialized: context=%s env=%s traces=%s", context, env, traces
    )
    return True


__all__ = [
    "init_sentry",
    "_parse_float_env",
]
