"""Load a JSON fixture of platform records into the database."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from advisor_engine.config import get_settings
from advisor_engine.core.logging import setup_logging
from advisor_engine.db.session import Database
from advisor_engine.models import Investment, InvestmentPlan, PortfolioHistory, Transaction, User

logger = logging.getLogger("scripts.load_seed")

DEFAULT_SEED = Path(__file__).with_name("seed_demo.json")
_DATE_FIELDS = {"start_date", "end_date", "created_at", "date"}


def _parse_row(row: dict[str, Any]) -> dict[str, Any]:
    return {
        key: datetime.fromisoformat(value) if key in _DATE_FIELDS and isinstance(value, str) else value
        for key, value in row.items()
    }


async def load_seed(database: Database, payload: dict[str, list[dict[str, Any]]]) -> dict[str, int]:
    """Insert every fixture table and return row counts per table."""

    await database.create_all()
    tables = (
        ("users", User),
        ("investment_plans", InvestmentPlan),
        ("investments", Investment),
        ("transactions", Transaction),
        ("portfolio_history", PortfolioHistory),
    )
    counts: dict[str, int] = {}
    async with database.session() as session:
        for key, model in tables:
            rows = payload.get(key, [])
            session.add_all(model(**_parse_row(row)) for row in rows)
            await session.flush()
            counts[key] = len(rows)
        await session.commit()
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Load seed records into the engine database")
    parser.add_argument("seed_file", nargs="?", default=str(DEFAULT_SEED))
    parser.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")
    args = parser.parse_args()

    setup_logging()
    seed_path = Path(args.seed_file)
    if not seed_path.exists():
        raise SystemExit(f"Seed file not found: {seed_path}")
    payload = json.loads(seed_path.read_text())

    database = Database(args.database_url or get_settings().database_url)

    async def _run() -> dict[str, int]:
        try:
            return await load_seed(database, payload)
        finally:
            await database.dispose()

    counts = asyncio.run(_run())
    logger.info("Loaded %s from %s", counts, seed_path)


if __name__ == "__main__":
    main()
