"""Smoke script for the manual exchange rate override.

Sequence (TestClient against a throwaway DB, 'static' provider):
 1. Resolve baseline rate.
 2. Admin sets manualExchangeRateZmwPerUsd; resolve again (source=manual).
 3. Admin clears the override; resolve again (back to cache).
"""

import tempfile
from pathlib import Path
from pprint import pprint

from fastapi.testclient import TestClient

from storefront_fx.core.config import Settings
from storefront_fx.main import create_app

TOKEN = "smoke-admin-token"


def run():
    with tempfile.TemporaryDirectory() as d:
        settings = Settings(
            db_path=Path(d) / "smoke.db",
            exchange_rate_provider="static",
            admin_api_token=TOKEN,
        )
        client = TestClient(create_app(settings_override=settings))
        headers = {"Authorization": f"Bearer {TOKEN}"}
        output = {}

        output["baseline"] = client.get("/exchange-rate").json()

        client.put(
            "/admin/settings/general",
            json={"manualExchangeRateZmwPerUsd": "21.75"},
            headers=headers,
        )
        output["override_active"] = client.get("/exchange-rate").json()

        client.put(
            "/admin/settings/general",
            json={"manualExchangeRateZmwPerUsd": None},
            headers=headers,
        )
        output["after_clear"] = client.get("/exchange-rate").json()

        pprint(output)


if __name__ == "__main__":
    run()
