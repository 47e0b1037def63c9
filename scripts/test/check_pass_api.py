# scripts/test/check_pass_api.py
"""
Checks the upstream pass-request API by hitting each read endpoint the portal uses.
Usage: python scripts/test/check_pass_api.py
       python scripts/test/check_pass_api.py --only reference
       python scripts/test/check_pass_api.py --token <jwt>
"""

import sys
import os
import argparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import requests
from app.config import settings
from app.services.pass_api_client import USER_ROLES

ENDPOINTS = {
    "reference": [
        ("categories", "/api/v1/categories/main", None),
        ("pass types", "/api/v1/categories/pass-types", {"active_only": "true"}),
        ("sessions", "/api/v1/categories/sessions", {"limit": 1000, "active_only": "true"}),
        ("issuers", "/api/v1/issuers", {"limit": 100, "is_active": "true"}),
    ],
    "users": [
        (f"users[{role}]", f"/api/v1/pass-requests/users/by-role/{role}", None) for role in USER_ROLES
    ],
    "requests": [
        ("pass requests", "/api/v1/pass-requests", {"limit": 1}),
    ],
}


def check_endpoint(path: str, params: dict, token: str) -> dict:
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    try:
        resp = requests.get(f"{settings.PASS_API_BASE_URL}{path}", params=params,
                            headers=headers, timeout=5)
    except requests.exceptions.ConnectTimeout:
        return {"status": "❌ timeout", "hint": "Upstream unreachable, check PASS_API_BASE_URL"}
    except requests.exceptions.ConnectionError:
        return {"status": "❌ connection_refused", "hint": "Nothing listening at PASS_API_BASE_URL"}

    if resp.status_code == 200:
        try:
            data = resp.json()
        except ValueError:
            return {"status": "⚠️  non-JSON response"}
        count = len(data) if isinstance(data, list) else "n/a"
        return {"status": "✅ ok", "count": count}
    if resp.status_code == 401:
        return {"status": "❌ auth_failed", "hint": "PASS_API_TOKEN missing or expired"}
    return {"status": f"❌ http_{resp.status_code}"}


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--only", choices=[*ENDPOINTS, "all"], default="all")
    parser.add_argument("--token", default=settings.PASS_API_TOKEN)
    args = parser.parse_args()
    groups = list(ENDPOINTS) if args.only == "all" else [args.only]

    print("📡 Upstream Pass API Check")
    print("=" * 55)
    print(f"Base URL : {settings.PASS_API_BASE_URL}")
    print(f"Token    : {'set' if args.token else 'not set'}")

    all_ok = True
    for group in groups:
        print(f"\n[{group}]")
        for label, path, params in ENDPOINTS[group]:
            result = check_endpoint(path, params, args.token)
            line = f"  {label:<18}: {result['status']}"
            if "count" in result:
                line += f" ({result['count']} records)"
            print(line)
            if not result["status"].startswith("✅"):
                all_ok = False
                if "hint" in result:
                    print(f"  {'':<18}  Hint: {result['hint']}")

    print("\n" + "=" * 55)
    if all_ok:
        print("✅ Upstream API reachable and token accepted.")
    else:
        print("⚠️  Some endpoints failed. Fix them before starting the backend.")
        sys.exit(1)


if __name__ == "__main__":
    main()
