"""
Webtrap Module
==============

Exports:
- WebtrapService: Unlock, upgrade and collection of the webtrap
- WebtrapResult: Player after a webtrap operation
"""

from .service import WebtrapResult, WebtrapService

__all__ = ["WebtrapService", "WebtrapResult"]
