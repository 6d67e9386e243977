"""Bot strategies for Skull."""

from .cautious_bot import CautiousBot
from .random_bot import RandomBot

__all__ = ["CautiousBot", "RandomBot"]
