# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cross-cutting utilities for NeuroAdapt.

- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from neuroadapt.utils.datetime import ensure_utc, utc_now
from neuroadapt.utils.logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "ensure_utc",
]
