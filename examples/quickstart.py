#!/usr/bin/env python3
"""
Gatehouse Quickstart — the full account lifecycle in one script.

Register → login → read profile → update → add address → cross-user check → delete.
Run with: python examples/quickstart.py

Requires: pip install httpx
All three services must be running (gateway on http://localhost:8080).
"""

import sys
import uuid

import httpx

GATEWAY = "http://localhost:8080"
BASE = f"{GATEWAY}/api/v1"


def main():
    run_id = uuid.uuid4().hex[:6]
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking gateway health...")
    try:
        resp = httpx.get(f"{GATEWAY}/health", timeout=5)
    except httpx.ConnectError:
        print(f"Gateway not reachable at {GATEWAY}")
        sys.exit(1)
    health = resp.json()
    print(f"  Auth service: {health.get('auth-service')}")
    print(f"  User service: {health.get('user-service')}")

    # ── Register ──────────────────────────────────────────────────
    email = f"demo-{run_id}@example.com"
    password = "demo-password-123"
    print("\n1. Registering...")
    resp = client.post(
        "/auth/register",
        json={"email": email, "name": f"Demo {run_id}", "password": password},
    )
    assert resp.status_code == 201, f"Failed: {resp.text}"
    user_id = resp.json()["user_id"]
    print(f"   User: {email} ({user_id[:8]}...)")

    # ── Login ─────────────────────────────────────────────────────
    print("\n2. Logging in...")
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    client.headers["Authorization"] = f"Bearer {resp.json()['token']}"
    print("   Token received")

    # ── Profile ───────────────────────────────────────────────────
    print("\n3. Reading and updating profile...")
    resp = client.get(f"/users/{user_id}")
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   Name: {resp.json()['name']}")

    resp = client.put(f"/users/{user_id}", json={"phone": "555-0100"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   Phone: {resp.json()['phone']}")

    # ── Addresses ─────────────────────────────────────────────────
    print("\n4. Adding an address...")
    resp = client.post(f"/users/{user_id}/addresses", json={
        "street": "1 Main St",
        "city": "Springfield",
        "postal_code": "12345",
        "country": "US",
        "is_default": True,
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    resp = client.get(f"/users/{user_id}/addresses")
    print(f"   Addresses on file: {len(resp.json())}")

    # ── Self-access only ──────────────────────────────────────────
    print("\n5. Trying to read someone else's profile...")
    resp = client.get(f"/users/{uuid.uuid4()}")
    print(f"   → {resp.status_code} {resp.json()['error']}")

    # ── Delete ────────────────────────────────────────────────────
    print("\n6. Deleting profile...")
    resp = client.delete(f"/users/{user_id}")
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   {resp.json()['message']}")

    print("\nDone.")


if __name__ == "__main__":
    main()
