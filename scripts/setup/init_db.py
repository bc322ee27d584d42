"""
Initialize the store — creates all tables and the default account.
Run once before first launch, or to check which file the app will use.
Usage: python scripts/setup/init_db.py [--deployment cars|students]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from backoffice.config import settings
from backoffice.database import Store
from backoffice.exceptions import StoreInitError


def main():
    parser = argparse.ArgumentParser(description="Initialize the backoffice store")
    parser.add_argument("--deployment", choices=["cars", "students"], default=settings.DEPLOYMENT)
    args = parser.parse_args()

    app_settings = settings.model_copy(update={"DEPLOYMENT": args.deployment})

    print("🗄️  Backoffice Store Initialization")
    print("=" * 40)
    print(f"📦 Deployment: {app_settings.DEPLOYMENT}")
    print(f"📡 Database: {app_settings.DATABASE_PATH}")

    store = Store(app_settings)
    try:
        store.acquire()
    except StoreInitError as e:
        print(f"❌ Cannot open the store: {e}")
        sys.exit(1)

    if store.durable:
        print(f"✅ Store file ready: {os.path.abspath(store.path)}")
    else:
        print("⚠️  Store is memory-only — nothing will be kept after this script exits")

    tables = store.table_names()
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        count = store.query_one(f"SELECT COUNT(*) AS count FROM {t}")["count"]
        print(f"   ✓ {t} ({count} rows)")

    store.dispose()
    print("\n🎉 Store ready! You can now start the backend:")
    print(f"   DEPLOYMENT={app_settings.DEPLOYMENT} uvicorn backoffice.main:app --port 8000 --reload")


if __name__ == "__main__":
    main()
