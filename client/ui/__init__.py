from .base import Renderer
from .cli import ChatCLI, ConsoleRenderer

__all__ = ["ChatCLI", "ConsoleRenderer", "Renderer"]
