"""包级日志器。"""

from __future__ import annotations

import logging

logger = logging.getLogger("imagegen_hub")
