"""
Exceptions raised while setting up a game.

Move rejections are not exceptions: they come back as
``MoveResult(ok=False, reason=MoveRejection...)`` so that callers decide how to
inform the offending player. Only configuration that can never produce a
playable game is raised.
"""


class ConfigurationError(ValueError):
    """Inconsistent game or AI configuration (detected before any move)."""
