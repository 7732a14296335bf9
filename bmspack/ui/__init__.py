"""Terminal UI package for bmspack."""

from .pack_tui import PackTUI

__all__ = ["PackTUI"]
