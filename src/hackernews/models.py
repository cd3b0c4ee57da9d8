"""Hacker News API data models.

Typed shapes for the JSON documents served by the Firebase API. Every field
the API may omit is ``Optional`` and defaults to ``None``, so an absent field
is never confused with ``0``, ``False``, ``""`` or ``[]``. The names of the
fields actually present in a payload are available as ``present_fields``.

Values are validated strictly: ``"104"`` is not a score and ``"yes"`` is not
a flag. A payload of the wrong type fails validation instead of being coerced.

Example:
    >>> item = Item.model_validate({"id": 8863, "type": "story", "score": 104})
    >>> item.score
    104
    >>> item.url is None
    True
    >>> sorted(item.present_fields)
    ['id', 'score', 'type']
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr, model_validator


class ItemType(str, Enum):
    """Kind of an item.

    Attributes:
        JOB: Job posting
        STORY: Story (link or text post)
        COMMENT: Comment on a story, poll or another comment
        POLL: Poll
        POLLOPT: Poll option
    """

    JOB = "job"
    STORY = "story"
    COMMENT = "comment"
    POLL = "poll"
    POLLOPT = "pollopt"


class StoryCategory(str, Enum):
    """Ranked story lists served by the API.

    The set is closed: ``StoryCategory("other")`` raises ``ValueError``.
    """

    TOP = "top"
    NEW = "new"
    BEST = "best"
    ASK = "ask"
    SHOW = "show"
    JOB = "job"

    @property
    def path(self) -> str:
        """Endpoint path relative to the API base URL."""
        return f"{self.value}stories.json"


def _to_datetime(timestamp: Optional[int]) -> Optional[datetime]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


class _ApiModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def present_fields(self) -> frozenset[str]:
        """Names of the fields that were present in the decoded payload."""
        return frozenset(self.model_fields_set)


class Item(_ApiModel):
    """A story, comment, job, poll or poll option.

    Attributes:
        id: The item's unique id
        deleted: True if the item is deleted
        type: Kind of item
        by: Username of the author (absent for deleted items)
        time: Creation date, Unix seconds
        text: Comment, story or poll text (HTML)
        dead: True if the item is dead
        parent: Parent comment or story (comments, poll options)
        poll: Owning poll (poll options)
        kids: Child comment ids in ranked display order
        url: URL of the story
        score: Story score, or votes for a poll option
        title: Title of the story, poll or job (HTML)
        parts: Related poll option ids, in display order
        descendants: Total comment count (stories, polls)
    """

    id: StrictInt
    deleted: Optional[StrictBool] = None
    type: Optional[ItemType] = None
    by: Optional[StrictStr] = None
    time: Optional[StrictInt] = None
    text: Optional[StrictStr] = None
    dead: Optional[StrictBool] = None
    parent: Optional[StrictInt] = None
    poll: Optional[StrictInt] = None
    kids: Optional[list[StrictInt]] = None
    url: Optional[StrictStr] = None
    score: Optional[StrictInt] = None
    title: Optional[StrictStr] = None
    parts: Optional[list[StrictInt]] = None
    descendants: Optional[StrictInt] = None

    @model_validator(mode="after")
    def check_type_specific_fields(self) -> "Item":
        """Reject fields that cannot belong to the item's type."""
        if self.type is ItemType.COMMENT:
            stray = [name for name in ("score", "title", "url") if getattr(self, name) is not None]
            if stray:
                raise ValueError(f"comment {self.id} carries story fields: {', '.join(stray)}")
        elif self.type is ItemType.STORY:
            stray = [name for name in ("parent", "poll") if getattr(self, name) is not None]
            if stray:
                raise ValueError(f"story {self.id} carries reply fields: {', '.join(stray)}")
        return self

    @property
    def created_at(self) -> Optional[datetime]:
        """Creation time as an aware UTC datetime."""
        return _to_datetime(self.time)


class User(_ApiModel):
    """A user profile.

    ``submitted`` is a list of item ids on the live API, but older consumers
    treated it as a count; both forms decode. Use ``submitted_count`` when
    only the number matters.

    Attributes:
        id: Case-sensitive username
        delay: Minutes between comment creation and visibility to others
        created: Creation date, Unix seconds
        karma: Karma, may be negative
        about: Self-description (HTML)
        submitted: Submitted item ids, or their count
    """

    id: StrictStr
    delay: Optional[StrictInt] = None
    created: Optional[StrictInt] = None
    karma: Optional[StrictInt] = None
    about: Optional[StrictStr] = None
    submitted: Optional[Union[list[StrictInt], StrictInt]] = None

    @property
    def submitted_count(self) -> Optional[int]:
        """Number of submitted items, whichever form the API sent."""
        if self.submitted is None:
            return None
        if isinstance(self.submitted, int):
            return self.submitted
        return len(self.submitted)

    @property
    def created_at(self) -> Optional[datetime]:
        """Creation time as an aware UTC datetime."""
        return _to_datetime(self.created)


class Updates(_ApiModel):
    """Recently changed items and profiles.

    Attributes:
        items: Ids of changed items
        profiles: Usernames of changed profiles
    """

    items: list[StrictInt]
    profiles: list[StrictStr]
