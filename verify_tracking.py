"""
Smoke test for a running tracking server.

Boots uvicorn, then drives create -> update -> duplicate -> history over HTTP.
Set STORAGE_BACKEND=database (and DATABASE_URL) to exercise the SQL stores;
with the database backend the server is restarted to confirm history survives.
"""

import time
import subprocess
import uuid
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"


def start_server():
    return subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "backend.app.main:app", "--host", "127.0.0.1", "--port", "8000"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ},
    )


def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return resp.json()
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return None


def post_checkpoint(unit_id, status):
    return httpx.post(f"{BASE_URL}{API_PREFIX}/checkpoint", json={
        "unitId": unit_id,
        "status": status,
        "timestamp": "2025-10-08T12:34:56.789Z",
    })


def verify_history(unit_id):
    resp = httpx.get(f"{BASE_URL}{API_PREFIX}/history", params={"unitId": unit_id})
    statuses = [c["status"] for c in resp.json()]
    if statuses != ["CREATED", "PICKED_UP", "DELIVERED"]:
        raise Exception(f"Unexpected history: {statuses}")
    print(f"✅ History: {statuses}")


def run_verification():
    unit_id = str(uuid.uuid4())

    print("\n--- [Step 1] Starting Server ---")
    proc = start_server()
    try:
        health = wait_for_server()
        if health is None:
            server_logs = proc.communicate(timeout=2)
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")

        print("\n--- [Step 2] Recording Checkpoints ---")
        for status in ("CREATED", "PICKED_UP", "DELIVERED"):
            resp = post_checkpoint(unit_id, status)
            if resp.status_code != 201:
                raise Exception(f"Checkpoint {status} failed: {resp.status_code} {resp.text}")
            print(f"✅ {status} recorded as {resp.json()['id']}")

        print("\n--- [Step 3] Duplicate Report ---")
        resp = post_checkpoint(unit_id, "DELIVERED")
        if resp.status_code != 409:
            raise Exception(f"Expected 409, got {resp.status_code} {resp.text}")
        print(f"✅ Duplicate rejected: {resp.json()['message']}")

        print("\n--- [Step 4] Invalid Status ---")
        resp = post_checkpoint(unit_id, "LOST")
        if resp.status_code != 400:
            raise Exception(f"Expected 400, got {resp.status_code} {resp.text}")
        print("✅ Invalid status rejected")

        print("\n--- [Step 5] Verifying History ---")
        verify_history(unit_id)
    finally:
        print("\n--- [Step 6] Stopping Server ---")
        stop_server(proc)

    if health["storage_backend"] != "database":
        return

    time.sleep(2)  # Wait for port release
    print("\n--- [Step 7] Restarting Server (Persistence) ---")
    proc = start_server()
    try:
        if wait_for_server() is None:
            raise Exception("Server restart failed")
        verify_history(unit_id)
    finally:
        stop_server(proc)


if __name__ == "__main__":
    run_verification()
