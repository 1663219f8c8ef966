from __future__ import annotations

import logging
from typing import Optional

from shared.protocol.constants import DEFAULT_COLOR

logger = logging.getLogger(__name__)


class IdentityState:
    """Holds the id and display color the server granted this session."""

    def __init__(self) -> None:
        self.user_id: Optional[str] = None
        self.color: str = DEFAULT_COLOR

    def assign(self, user_id: str, color: str) -> None:
        # A repeated assign overwrites without complaint.
        if self.user_id is not None:
            logger.debug("Identity %s reassigned to %s", self.user_id, user_id)
        self.user_id = user_id
        self.color = color
        logger.info("Session identity assigned: %s (%s)", user_id, color)

    def is_assigned(self) -> bool:
        return self.user_id is not None
