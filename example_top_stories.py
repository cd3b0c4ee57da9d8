"""Example: print the top stories, the best story of each category and who posted last."""

import asyncio

from src.hackernews import HackerNewsClient, StoryCategory
from src.utils.logging_config import get_logger, setup_logging

setup_logging(use_json=False)
logger = get_logger(__name__)


async def main() -> None:
    async with HackerNewsClient() as hn:
        print("=== Top 5 stories ===")
        stories = await hn.get_stories(StoryCategory.TOP, 0, 5)
        for rank, story in enumerate(stories, start=1):
            if story is None:
                continue
            print(f"{rank}. {story.title} [{story.score}] ({story.url})")

        print("\n=== First story per category ===")
        for category in StoryCategory:
            first = await hn.get_stories(category, 0, 1)
            if first and first[0] is not None:
                print(f"{category.value}: {first[0].title}")

        print("\n=== Latest item ===")
        item = await hn.get_max_item()
        if item is None or item.by is None:
            logger.warning("Latest item is not visible yet")
            return
        user = await hn.get_user(item.by)
        if user:
            print(f"Latest item was posted by {user.id} [{user.karma}]")


if __name__ == "__main__":
    asyncio.run(main())
