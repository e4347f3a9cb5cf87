"""
Centralized test credentials.

Loaded from environment variables when available, with clearly
non-production placeholders as fallbacks.
"""

from __future__ import annotations

import os

# Weather provider key: fallback is obviously a placeholder
TEST_TOMORROW_API_KEY = os.environ.get("TEST_TOMORROW_API_KEY") or "k"
