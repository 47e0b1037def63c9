# scripts/setup/init_db.py
"""
Initialize the local audit database and check the upstream API is reachable.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import requests
from sqlalchemy import inspect, text

from app.database import create_tables, engine
from app.config import settings


def main():
    print("🗄️  Visitor Pass Portal: DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = inspect(engine).get_table_names()
    print(f"✅ Tables ready ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print(f"\n🌐 Upstream API: {settings.PASS_API_BASE_URL}")
    try:
        resp = requests.get(f"{settings.PASS_API_BASE_URL}/api/v1/categories/main", timeout=5)
        print(f"   → HTTP {resp.status_code}")
    except requests.exceptions.RequestException as e:
        print(f"⚠️  Upstream API unreachable: {e}")

    print("\n🎉 Ready! Start the backend with:")
    print(f"   uvicorn app.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
