# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""NeuroAdapt: evidence-weighted accessibility preset selection."""

__version__ = "0.1.0"
