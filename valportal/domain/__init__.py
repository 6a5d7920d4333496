"""Domain layer: pure portal models and the sitemap grouping logic.

Nothing here touches the database, HTTP or rendering.
"""

from . import models, sitemap

__all__ = ["models", "sitemap"]
