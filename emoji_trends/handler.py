"""
Event entrypoint for the Emoji Trends Explorer

UI widgets emit small event payloads; this module dispatches them to the
explorer jobs and returns render-ready dictionaries. No HTTP server logic.
"""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, Optional

from emoji_trends.config.settings import settings
from emoji_trends.explorer import TrendsExplorer
from emoji_trends.jobs.explore import (
    parse_year,
    run_catalog_page,
    run_selection_change,
    run_sentiment_view,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# One explorer per reading session
explorer = TrendsExplorer()


async def handle_event(event: Optional[Dict[str, Any]], *, session: Optional[TrendsExplorer] = None) -> Dict[str, Any]:
    """
    Dispatch one UI event to the explorer.

    Expected event payloads:
    - {"action": "select", "emojis": ["dog", "cat"]}
    - {"action": "granularity", "granularity": "month"}
    - {"action": "year", "year": 2023}            ("all" clears the year)
    - {"action": "catalog", "page": 2, "category": "Animals & Nature", "query": "cat", "sort": "score"}
    - {"action": "details", "id": "dog"}
    - {"action": "sentiment", "polarity": "positive", "hide_rare": true}

    Default action is "select" with the current selection.

    Args:
        event: Event payload from the UI layer
        session: Explorer to use instead of the module-level one

    Returns:
        Dictionary with status, action, and result or error
    """
    target = session or explorer
    payload = event or {}
    action = payload.get("action", "select")
    logger.info(f"Event received: {action}")

    try:
        if action == "select":
            result = await run_selection_change(
                explorer=target,
                selection=payload.get("emojis", list(target.store.selected)),
            )

        elif action == "granularity":
            result = await target.set_granularity(payload.get("granularity", "day"))

        elif action == "year":
            result = await target.set_year(parse_year(payload.get("year")))

        elif action == "catalog":
            result = await run_catalog_page(
                explorer=target,
                page=int(payload.get("page", 1)),
                page_size=payload.get("page_size"),
                category=payload.get("category"),
                query=payload.get("query"),
                sort=payload.get("sort", "unicode"),
                only_tracked=bool(payload.get("only_tracked", False)),
            )

        elif action == "details":
            if not target.catalog.is_loaded:
                await target.load_datasets(stages=["catalog"])
            details = target.catalog.details(str(payload.get("id", "")))
            if details is None:
                return {"status": 404, "action": action, "error": f"Unknown emoji: {payload.get('id')}"}
            result = {
                "char": details.char,
                "name": details.name,
                "score": details.score,
                "popularity_rank": details.popularity_rank,
                "category": details.category,
                "description": details.description,
                "variations": details.variations,
                "platforms": details.platforms,
                "notes": details.notes,
            }

        elif action == "sentiment":
            result = await run_sentiment_view(
                explorer=target,
                polarity=payload.get("polarity", "all"),
                hide_rare=bool(payload.get("hide_rare", False)),
            )

        else:
            error_msg = f"Unknown action: {action}"
            logger.error(error_msg)
            return {"status": 400, "action": action, "error": error_msg}

        return {"status": 200, "action": action, "result": result}

    except ValueError as e:
        logger.warning(f"Rejected event {action}: {e}")
        return {"status": 400, "action": action, "error": str(e)}

    except Exception as e:
        logger.error(f"Event handling failed: {e}", exc_info=True)
        return {"status": 500, "action": action, "error": str(e)}


async def _replay(events: list) -> list:
    try:
        return [await handle_event(event) for event in events]
    finally:
        await explorer.aclose()


# Allow local testing via `python -m emoji_trends.handler '[{"action": "select", "emojis": ["dog"]}]'`
if __name__ == "__main__":
    raw_events = sys.argv[1] if len(sys.argv) > 1 else '[{"action": "select", "emojis": ["dog", "cat"]}]'
    for response in asyncio.run(_replay(json.loads(raw_events))):
        print(json.dumps(response, default=str, ensure_ascii=False, indent=2))
