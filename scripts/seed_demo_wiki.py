"""
Seed a small demo wiki (Bayes' rule and its prerequisites) into the configured database.
Runs in-process against DATABASE_URL; safe to re-run, existing pages are left alone.
"""
import asyncio
import logging
import os
import sys

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

# Ensure we can import learnpath
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

PAGES = [
    ("1lw", "bayes_rule", "Bayes' rule", "The most important rule of probability theory."),
    ("1x5", "bayes_rule_odds", "Bayes' rule: Odds form", "Compare two hypotheses quickly."),
    ("1xr", "bayes_rule_proportional", "Bayes' rule: Proportional form", ""),
    ("1rf", "probability", "Probability", "What does a number between 0 and 1 mean?"),
    ("1rb", "probability_intro", "Introduction to probability", ""),
    ("1rb3", "conditional_probability", "Conditional probability", ""),
    ("1rj", "odds", "Odds", ""),
    ("1rj1", "odds_intro", "Introduction to odds", ""),
]
# (parent, child, type): subject = child teaches parent, requirement = child requires parent
PAIRS = [
    ("1lw", "1x5", "subject"),
    ("1lw", "1xr", "subject"),
    ("1rf", "1rb", "subject"),
    ("1rb3", "1rb", "subject"),
    ("1rj", "1rj1", "subject"),
    ("1rj", "1x5", "requirement"),
    ("1rb3", "1x5", "requirement"),
    ("1rf", "1xr", "requirement"),
    ("1rf", "1rj1", "requirement"),
]
# (page, lens, index)
LENSES = [
    ("1lw", "1x5", 0, "Odds form"),
    ("1lw", "1xr", 1, "Proportional form"),
]


async def main():
    from sqlalchemy import select

    from learnpath.database import async_session_maker, close_db, init_db
    from learnpath.kernel.models import Lens, Page, PagePair

    await init_db()
    async with async_session_maker() as session:
        existing = set((await session.execute(select(Page.page_id))).scalars().all())
        if existing:
            print(f"Database already has {len(existing)} page(s); only adding missing ones")

        added = 0
        for page_id, alias, title, clickbait in PAGES:
            if page_id in existing:
                continue
            session.add(Page(page_id=page_id, alias=alias, title=title, clickbait=clickbait))
            added += 1
        if added:
            for parent_id, child_id, pair_type in PAIRS:
                session.add(PagePair(parent_id=parent_id, child_id=child_id, type=pair_type))
            for page_id, lens_id, index, name in LENSES:
                session.add(Lens(page_id=page_id, lens_id=lens_id, lens_index=index, lens_name=name))
        await session.commit()

    await close_db()
    print(f"Added {added} page(s), {len(PAIRS) if added else 0} pair(s)")
    print("Try: python scripts/check_learn_path.py bayes_rule")


if __name__ == "__main__":
    asyncio.run(main())
