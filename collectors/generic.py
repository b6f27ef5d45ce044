# collectors/generic.py
from __future__ import annotations

from collectors.base import BaseOSCollector


class GenericCollector(BaseOSCollector):
    """
    Fallback for platforms without a dedicated collector (AIX, Haiku, ...).
    Every operation answers with defaults and no probe is ever run.
    """
