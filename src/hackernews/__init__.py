"""Typed async client for the Hacker News API."""

from src.hackernews.client import HackerNewsClient, paginate_ids
from src.hackernews.exceptions import DecodeError, HackerNewsError, TransportError
from src.hackernews.models import Item, ItemType, StoryCategory, Updates, User

__all__ = [
    "DecodeError",
    "HackerNewsClient",
    "HackerNewsError",
    "Item",
    "ItemType",
    "StoryCategory",
    "TransportError",
    "Updates",
    "User",
    "paginate_ids",
]
