"""
Capture a real Health Connect sensor state and save it as a test fixture.

Run this script with HEALTHNOTES_INSTANCE_URI and HEALTHNOTES_TOKEN set:

    python scripts/capture_fixtures.py [--sensor SENSOR] [--days N]

Outputs (overwrite tests/fixtures/):
    sensor_snapshot.json    — the sensor's `attributes`, trimmed to the
                              N most recent dates per category

These fixtures are used by the integration tests to ensure the projectors
handle the uploader's real attribute schema, not hand-crafted guesses.
"""
import argparse
import json
import sys
from pathlib import Path

import requests

# Allow running from repo root without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from healthnotes.config import get_settings
from healthnotes.hass.client import SensorClient
from healthnotes.models.readings import IGNORED_DATES


FIXTURES_DIR = Path(__file__).parent.parent / "tests" / "fixtures"


def _trim(collection, days: int):
    if not isinstance(collection, dict):
        return collection
    dates = sorted(k for k in collection if k not in IGNORED_DATES)[-days:]
    return {k: v for k, v in collection.items() if k in dates or k in IGNORED_DATES}


def main() -> None:
    parser = argparse.ArgumentParser(description="Capture a real Health Connect sensor fixture")
    parser.add_argument("--sensor", help="Sensor name (default: from settings)")
    parser.add_argument("--days", type=int, default=2, help="Dates to keep per category")
    args = parser.parse_args()

    settings = get_settings()
    client = SensorClient.from_settings(settings)
    if args.sensor:
        client.sensor = args.sensor

    print(f"🔑 Fetching {client.sensor_url()}...")
    response = requests.get(client.sensor_url(), headers=client._headers(), timeout=client.timeout)
    if response.status_code != 200:
        print(f"❌ Home Assistant returned HTTP {response.status_code}")
        sys.exit(1)

    attributes = response.json().get("attributes") or {}
    trimmed = {category: _trim(data, args.days) for category, data in attributes.items()}

    FIXTURES_DIR.mkdir(parents=True, exist_ok=True)
    path = FIXTURES_DIR / "sensor_snapshot.json"
    path.write_text(json.dumps(trimmed, indent=2))
    print(f"  ✅ Saved {path} ({path.stat().st_size} bytes)")

    print("\n⚠️  Check the saved file for any personal data before committing.\n")
    print("📊 Summary:")
    for category, data in trimmed.items():
        count = len(data) if isinstance(data, dict) else 0
        print(f"   {category:<10} {count} keys")


if __name__ == "__main__":
    main()
