"""Smoke script for the exchange rate cache.

Demonstrates, against a throwaway DB and the 'static' provider:
 1. First resolution goes to the provider (source=live) and fills the cache.
 2. A second resolution within the TTL is served from the cache.
 3. Backdating the entry past expiresAt forces a fresh provider call.

NOTE: This is a lightweight diagnostic and not a formal test.
"""

import json
import tempfile
from datetime import timedelta
from pathlib import Path
from pprint import pprint

from storefront_fx.core.config import Settings
from storefront_fx.db.dal import Database
from storefront_fx.db.schema import init_db
from storefront_fx.services.rates.cache_service import CACHE_KEY
from storefront_fx.services.rates.providers import to_epoch_ms, utc_now
from storefront_fx.services.rates.wiring import build_exchange_rate_resolver


def run():
    with tempfile.TemporaryDirectory() as d:
        settings = Settings(db_path=Path(d) / "smoke.db", exchange_rate_provider="static")
        init_db(settings.db_path)
        db = Database(settings.db_path)
        resolver = build_exchange_rate_resolver(db, settings)
        out = {}

        out["initial"] = resolver.resolve_rate().model_dump(by_alias=True)
        out["second"] = resolver.resolve_rate().model_dump(by_alias=True)

        entry = json.loads(db.get_metadata_value(CACHE_KEY))
        past = to_epoch_ms(utc_now() - timedelta(days=2))
        entry.update(timestamp=past, expiresAt=past + settings.rates_cache_ttl_seconds * 1000)
        db.set_metadata_value(CACHE_KEY, json.dumps(entry))

        out["forced_refresh"] = resolver.resolve_rate().model_dump(by_alias=True)
        pprint(out)


if __name__ == "__main__":
    run()
