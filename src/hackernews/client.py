"""Hacker News API client.

Async, typed access to the public Firebase API: items, users, the newest
item id, the ranked story lists and recent updates. ``get_stories`` pages
through a story list and fetches the selected items concurrently.

Example:
    async with HackerNewsClient() as hn:
        stories = await hn.get_stories(StoryCategory.TOP, amount=5)
"""

import asyncio
import logging
from typing import Any, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from src.hackernews.exceptions import DecodeError, TransportError
from src.hackernews.models import Item, StoryCategory, Updates, User
from src.utils.config import get_settings

logger = logging.getLogger(__name__)

CategoryLike = Union[StoryCategory, str]


def check_page_bounds(offset: int, amount: int) -> None:
    """Raise ValueError if a page offset or size is negative."""
    if offset < 0:
        raise ValueError("Offset must be non-negative")
    if amount < 0:
        raise ValueError("Amount must be non-negative")


def paginate_ids(ids: list[int], offset: int = 0, amount: int = 0) -> list[int]:
    """Select the page of a ranked id list that ``get_stories`` fetches.

    With ``amount == 0`` the whole list is returned and ``offset`` is ignored.
    Otherwise the page is ``ids[min(offset, n - 1):min(offset + amount, n - 1)]``.
    Both bounds are clamped to ``n - 1``, so the last id of the list is never
    part of a page. Existing callers depend on that, keep it.

    Args:
        ids: Story ids in rank order
        offset: Index of the first id, 0 being the highest ranked
        amount: Page size, 0 for no limit

    Returns:
        The selected ids, in rank order. Empty when offset is past the end.

    Raises:
        ValueError: If offset or amount is negative
    """
    check_page_bounds(offset, amount)

    if not amount:
        return list(ids)

    last = len(ids) - 1
    return ids[min(offset, last):min(offset + amount, last)]


class HackerNewsClient:
    """Client for the Hacker News Firebase API.

    Holds no state besides its configuration and HTTP connection pool.
    Pass ``http_client`` to share a pool or to substitute a test double; an
    injected client is never closed by ``aclose``.

    Args:
        base_url: API root, defaults to ``HN_API_BASE_URL``
        http_client: ``httpx.AsyncClient`` to send requests with
        timeout: Request timeout in seconds, defaults to ``API_TIMEOUT``
        max_concurrency: Cap on concurrent item fetches in ``get_stories``,
            defaults to ``HN_MAX_CONCURRENCY`` (unset means unbounded)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        max_concurrency: Optional[int] = None,
    ) -> None:
        settings = get_settings()

        self.base_url = (base_url or settings.HN_API_BASE_URL).rstrip("/") + "/"
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT

        if max_concurrency is None:
            max_concurrency = settings.HN_MAX_CONCURRENCY
        if max_concurrency is not None and max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self.max_concurrency = max_concurrency

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.timeout)

    async def __aenter__(self) -> "HackerNewsClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def url_for(self, path: str) -> str:
        """Full URL of an endpoint path."""
        return f"{self.base_url}{path.lstrip('/')}"

    async def _get_json(self, path: str) -> Any:
        """GET an endpoint and return the decoded JSON body.

        Raises:
            TransportError: On connection errors, timeouts and non-2xx status
            DecodeError: If the body is not valid JSON
        """
        url = self.url_for(path)
        context = {"url": url}
        logger.debug(f"GET {url}", extra={"extra_fields": context})

        try:
            response = await self._client.get(url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(
                f"Hacker News API returned {status_code} for {url}",
                extra={"extra_fields": {**context, "status_code": status_code}},
            )
            raise TransportError(
                f"HTTP {status_code} from Hacker News API", url=url, status_code=status_code
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                f"Request to {url} failed: {e!r}", extra={"extra_fields": context}
            )
            raise TransportError(f"Request failed: {e!r}", url=url) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}", extra={"extra_fields": context})
            raise DecodeError(f"Response is not valid JSON: {e}", url=url) from e

    async def _get_model(self, path: str, model: type, nullable: bool = True) -> Any:
        """GET an endpoint and validate the body against a pydantic model."""
        data = await self._get_json(path)
        if data is None:
            if nullable:
                logger.debug(f"{path} not found")
                return None
            raise DecodeError(f"Unexpected null response for {path}", url=self.url_for(path))

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed {model.__name__} payload from {path}: {e}")
            raise DecodeError(
                f"Response does not match {model.__name__}: {e}", url=self.url_for(path)
            ) from e

    async def _get_id_list(self, path: str) -> list[int]:
        data = await self._get_json(path)
        if not isinstance(data, list) or not all(
            isinstance(item_id, int) and not isinstance(item_id, bool) for item_id in data
        ):
            raise DecodeError(
                f"Expected a list of item ids from {path}, got {type(data).__name__}",
                url=self.url_for(path),
            )
        return data

    async def get_item(self, item_id: int) -> Optional[Item]:
        """Get an item by id.

        Args:
            item_id: Positive item id

        Returns:
            The item, or None if it does not exist

        Raises:
            ValueError: If item_id is not a positive integer
            TransportError: If the request fails
            DecodeError: If the response is malformed
        """
        if isinstance(item_id, bool) or not isinstance(item_id, int) or item_id <= 0:
            raise ValueError(f"Item id must be a positive integer, got {item_id!r}")
        return await self._get_model(f"item/{item_id}.json", Item)

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by username (case-sensitive).

        The username is percent-encoded, so it always addresses
        ``user/<id>.json`` and never another endpoint.

        Returns:
            The user, or None if no such user exists

        Raises:
            ValueError: If user_id is empty
            TransportError: If the request fails
            DecodeError: If the response is malformed
        """
        if not isinstance(user_id, str) or not user_id.strip():
            raise ValueError("User id cannot be empty")
        return await self._get_model(f"user/{quote(user_id, safe='')}.json", User)

    async def get_max_item_id(self) -> int:
        """Get the id of the newest item."""
        data = await self._get_json("maxitem.json")
        if isinstance(data, bool) or not isinstance(data, int):
            raise DecodeError(
                f"Expected an item id from maxitem.json, got {data!r}",
                url=self.url_for("maxitem.json"),
            )
        return data

    async def get_max_item(self) -> Optional[Item]:
        """Get the newest item.

        The id comes from ``maxitem.json``; the item itself may not be
        visible yet, in which case None is returned.
        """
        return await self.get_item(await self.get_max_item_id())

    async def get_story_ids(self, category: CategoryLike) -> list[int]:
        """Get the ranked story ids of a category.

        Args:
            category: One of top, new, best, ask, show, job

        Returns:
            Story ids, highest ranked first

        Raises:
            ValueError: If category is not a known story category
        """
        return await self._get_id_list(StoryCategory(category).path)

    async def get_top_story_ids(self) -> list[int]:
        """Up to 500 top story ids."""
        return await self.get_story_ids(StoryCategory.TOP)

    async def get_new_story_ids(self) -> list[int]:
        """Up to 500 newest story ids."""
        return await self.get_story_ids(StoryCategory.NEW)

    async def get_best_story_ids(self) -> list[int]:
        """Up to 500 best story ids."""
        return await self.get_story_ids(StoryCategory.BEST)

    async def get_ask_story_ids(self) -> list[int]:
        """Up to 200 newest Ask HN story ids."""
        return await self.get_story_ids(StoryCategory.ASK)

    async def get_show_story_ids(self) -> list[int]:
        """Up to 200 newest Show HN story ids."""
        return await self.get_story_ids(StoryCategory.SHOW)

    async def get_job_story_ids(self) -> list[int]:
        """Up to 200 newest job story ids."""
        return await self.get_story_ids(StoryCategory.JOB)

    async def get_updates(self) -> Updates:
        """Get recently changed item ids and usernames."""
        return await self._get_model("updates.json", Updates, nullable=False)

    async def get_stories(
        self,
        category: CategoryLike,
        offset: int = 0,
        amount: int = 0,
    ) -> list[Optional[Item]]:
        """Get one page of stories from a category.

        The page is selected with :func:`paginate_ids` and its items are
        fetched concurrently. Results keep the rank order of the ids. If any
        item fetch fails the whole call fails; no partial page is returned.

        Args:
            category: One of top, new, best, ask, show, job
            offset: Index of the first story, 0 being the highest ranked
            amount: Number of stories, 0 for the whole list

        Returns:
            Items in rank order; None for ids whose item no longer exists

        Raises:
            ValueError: If category is unknown or offset/amount is negative
            TransportError: If any request fails
            DecodeError: If any response is malformed
        """
        category = StoryCategory(category)
        # Reject bad bounds before the id list is requested
        check_page_bounds(offset, amount)

        story_ids = paginate_ids(await self.get_story_ids(category), offset, amount)
        logger.debug(
            f"Fetching {len(story_ids)} {category.value} stories "
            f"(offset={offset}, amount={amount})"
        )
        if not story_ids:
            return []

        if self.max_concurrency is None:
            return list(await asyncio.gather(*(self.get_item(i) for i in story_ids)))

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch(item_id: int) -> Optional[Item]:
            async with semaphore:
                return await self.get_item(item_id)

        return list(await asyncio.gather(*(fetch(i) for i in story_ids)))
