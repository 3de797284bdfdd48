"""
デモ用の初期データ。

list() は新しい順で返るので、画面に出したい順の逆から put() する。
記事は読み取り専用の参考コンテンツなので SEED_DEMO_DATA に関係なく入れる。
"""
import logging
from datetime import timedelta
from typing import List

from schemas.article import Article
from schemas.base import utcnow
from schemas.journal import JournalEntry, JournalFile
from schemas.plant import Plant

logger = logging.getLogger(__name__)


def demo_plants() -> List[Plant]:
    now = utcnow()
    ago = lambda days: now - timedelta(days=days)  # noqa: E731

    return [
        Plant(
            name="Monstera Deliciosa",
            scientific_name="Monstera deliciosa",
            image="https://picsum.photos/id/106/500/600",
            light="Medium",
            health="healthy",
            location="Living Room",
            watering_frequency=7,
            last_watered=ago(5),
            fertilizing_frequency=30,
            last_fertilized=ago(10),
            grooming_frequency=60,
            last_groomed=ago(20),
            sunlight="Bright, indirect light",
            humidity="Medium Humidity",
            notes="Loves to be misted occasionally. Check for new leaves unfurling!",
            fertilizer_details="Use a balanced liquid fertilizer (20-20-20) every 4 weeks during the growing season.",
        ),
        Plant(
            name="Snake Plant",
            scientific_name="Dracaena trifasciata",
            image="https://picsum.photos/id/152/500/600",
            light="Low",
            health="healthy",
            location="Bedroom",
            watering_frequency=21,
            last_watered=ago(15),
            fertilizing_frequency=90,
            last_fertilized=ago(50),
            grooming_frequency=120,
            last_groomed=ago(50),
            sunlight="Low to bright, indirect light",
            humidity="Low Humidity",
            notes="Very resilient. Almost impossible to kill. Water sparingly.",
        ),
        Plant(
            name="Fiddle Leaf Fig",
            scientific_name="Ficus lyrata",
            image="https://picsum.photos/id/206/500/600",
            light="Bright",
            health="attention",
            location="Office",
            watering_frequency=10,
            last_watered=ago(11),
            fertilizing_frequency=30,
            last_fertilized=ago(15),
            grooming_frequency=45,
            last_groomed=ago(30),
            sunlight="Bright, consistent light",
            humidity="High Humidity",
            notes="A bit fussy. Avoid moving it and keep away from drafts. Leaves have some brown spots.",
        ),
    ]


def demo_journal_entries() -> List[JournalEntry]:
    now = utcnow()
    return [
        JournalEntry(
            title="Repotted the Monstera!",
            content=(
                "Finally moved the Monstera to a larger pot. The roots were looking really healthy. "
                "Used a mix of potting soil, perlite, and orchid bark. Watered it thoroughly after repotting."
            ),
            date=now - timedelta(days=3),
        ),
        JournalEntry(
            title="First Flower on the Orchid",
            content=(
                "Woke up this morning to see the first bloom on the Phalaenopsis orchid. "
                "It's a beautiful white and purple flower. So exciting!"
            ),
            date=now - timedelta(days=10),
            file=JournalFile(
                name="orchid_bloom.jpg",
                type="image",
                url="https://picsum.photos/id/1027/400/300",
            ),
        ),
    ]


def reference_articles() -> List[Article]:
    return [
        Article(
            title="The Ultimate Guide to Watering Your Houseplants",
            category="Watering",
            type="Guide",
            description="Learn the do's and don'ts of watering to keep your plants perfectly hydrated.",
            image="https://picsum.photos/id/1015/400/300",
            link="#",
            content=(
                "**Watering is crucial, but overwatering is the #1 killer of houseplants.**\n\n"
                "Most people think more water is better, but plant roots need oxygen too. When soil is "
                "constantly soggy, roots can't breathe and they begin to rot.\n\n"
                "The best rule of thumb is to check the soil. Stick your finger about an inch or two into "
                "the soil. If it feels dry, it's time to water. If it's still moist, wait a few more days."
            ),
        ),
        Article(
            title="Decoding Sunlight: How Much Light Does Your Plant Need?",
            category="Sunlight",
            type="Article",
            description="From low light to full sun, find the perfect spot for every plant in your home.",
            image="https://picsum.photos/id/103/400/300",
            link="#",
            content=(
                "**Sunlight is food for your plants.**\n\n"
                "It's the energy source for photosynthesis. But not all light is created equal.\n\n"
                "*   **Bright, direct light:** At least 4-6 hours of direct sun. Great for cacti and succulents.\n"
                "*   **Bright, indirect light:** A bright spot where the sun's rays don't directly hit the "
                "leaves. Most tropical houseplants love this.\n"
                "*   **Medium light:** A spot that gets indirect light for part of the day, but is further "
                "from a window.\n"
                "*   **Low light:** A room with no direct sun, like a north-facing window. Best for plants "
                "like the Snake Plant or ZZ Plant."
            ),
        ),
        Article(
            title="Beginner's Guide to Repotting",
            category="Repotting",
            type="Guide",
            description="Give your plants room to grow with this simple, step-by-step repotting guide.",
            image="https://picsum.photos/id/1068/400/300",
            link="#",
            content=(
                "**Don't be afraid to repot!**\n\n"
                "It seems intimidating, but it's essential for a plant's long-term health. \n\n"
                "**When to Repot:**\n\n"
                "*   Roots are growing out of the drainage holes.\n"
                "*   The plant is top-heavy and falls over easily.\n"
                "*   Water runs straight through the pot without being absorbed.\n\n"
                "Choose a pot that is only 1-2 inches larger in diameter than the current one."
            ),
        ),
    ]


def seed_store(store, demo: bool = True) -> None:
    """空のコレクションにだけ入れる（再起動で二重にならないように）"""
    if store.articles.count() == 0:
        for article in reversed(reference_articles()):
            store.articles.put(article)
        logger.info("seeded reference articles")

    if not demo:
        return

    if store.plants.count() == 0:
        for plant in reversed(demo_plants()):
            store.plants.put(plant)
        logger.info("seeded demo plants")

    if store.journal.count() == 0:
        for entry in reversed(demo_journal_entries()):
            store.journal.put(entry)
        logger.info("seeded demo journal entries")
