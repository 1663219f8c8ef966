from __future__ import annotations

from typing import Any, Dict, Protocol

from shared.protocol.commands import RenderKind


class Renderer(Protocol):
    """Presentation seam: every classified timeline entry goes through render()."""

    def render(self, kind: RenderKind, payload: Dict[str, Any]) -> None: ...


__all__ = ["Renderer"]
