import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
SERVER_CMD = [
    sys.executable, "-m", "uvicorn", "parcel_tracker.app.main:app",
    "--host", "127.0.0.1", "--port", "8000",
]


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for _ in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def run_verification():
    print("\n--- [Step 1] Starting Server (Initial) ---")
    # Echoed SQL is verbose; keep it out of unread pipes
    proc = subprocess.Popen(
        SERVER_CMD,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        env={**os.environ, "DB_ECHO": "True"}
    )

    try:
        if not wait_for_server():
            raise RuntimeError("Server start failed")

        print("\n--- [Step 2] Registering Parcel ---")
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/parcels", json={
            "client": 1000,
            "address": "persistence check"
        })
        if resp.status_code != 201:
            raise RuntimeError(f"Registration failed: {resp.status_code} {resp.text}")
        registered = resp.json()
        print("✅ Parcel Registered:", registered)
    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)

    time.sleep(2)  # Wait for port release

    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = subprocess.Popen(SERVER_CMD, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)

    try:
        if not wait_for_server():
            raise RuntimeError("Server restart failed")

        print("\n--- [Step 5] Fetching Parcel (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/parcels/{registered['number']}")
        if resp.status_code == 200 and resp.json() == registered:
            print("✅ Parcel Persisted:", resp.json())
        else:
            print(f"❌ Parcel Lost (Persistence Issue?): {resp.status_code} {resp.text}")
            raise RuntimeError("Parcel missing after restart")

        print("\n--- [Step 6] Cleaning Up ---")
        resp = httpx.delete(f"{BASE_URL}{API_PREFIX}/parcels/{registered['number']}")
        print("✅ Parcel Deleted" if resp.status_code == 204 else f"⚠️ Cleanup failed: {resp.status_code}")
    finally:
        print("\n--- [Step 7] Stopping Server ---")
        stop_server(proc2)


if __name__ == "__main__":
    run_verification()
