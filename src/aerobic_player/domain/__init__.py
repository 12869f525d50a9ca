"""
Domain Layer

Contains pure playback logic:
- shared/: Cross-cutting exceptions, messages and types
- playback/: Items, configuration, segment planning and status events
"""

from aerobic_player.domain.shared.exceptions import DomainError

__all__ = ["DomainError"]
