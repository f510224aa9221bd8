"""
Load test for the BuddyUp matching API.
Fires many match requests at once, including both directions of the same
pair, and counts how many were created vs. turned away with 409.

Run the app with debug=True locally; requests authenticate with the
X-Debug-User-Id header.
"""

import asyncio
import random
import time
from collections import Counter

import aiohttp

# -----------------------------
# CONFIG: ADJUST IF NEEDED
# -----------------------------
BASE_URL = "http://127.0.0.1:5000"

# Seeded user id range (see seed_buddies.py)
MIN_USER_ID = 1
MAX_USER_ID = 200

# Sport ids to try
SPORT_IDS = [1, 2, 3, 4, 5]

# Total POST requests to send
TOTAL_REQUESTS = 2000

# How many run simultaneously
MAX_CONCURRENT = 100


# -----------------------------
# Load test functions
# -----------------------------
async def send_request(session, requester_id, recipient_id, sport_id):
    payload = {"recipient_id": recipient_id, "sport_id": sport_id}
    headers = {"X-Debug-User-Id": str(requester_id)}

    try:
        async with session.post(f"{BASE_URL}/api/matching/request", json=payload, headers=headers) as resp:
            text = await resp.text()
            if resp.status >= 500:
                print(f"[ERROR {resp.status}] {requester_id}->{recipient_id} sport={sport_id} :: {text[:200]}")
            return resp.status
    except Exception as e:
        print(f"[EXCEPTION] {e} :: {requester_id}->{recipient_id}")
        return None


async def worker(name, session, task_queue, statuses):
    while True:
        item = await task_queue.get()
        if item is None:
            task_queue.task_done()
            break

        requester_id, recipient_id, sport_id = item
        status = await send_request(session, requester_id, recipient_id, sport_id)
        statuses[status] += 1
        task_queue.task_done()


async def main():
    task_queue = asyncio.Queue()
    statuses = Counter()

    # Each pair is queued in both directions to provoke create races
    for _ in range(TOTAL_REQUESTS // 2):
        a, b = random.sample(range(MIN_USER_ID, MAX_USER_ID + 1), 2)
        sport = random.choice(SPORT_IDS)
        await task_queue.put((a, b, sport))
        await task_queue.put((b, a, sport))

    # Add sentinel None tasks to close workers
    for _ in range(MAX_CONCURRENT):
        await task_queue.put(None)

    async with aiohttp.ClientSession() as session:
        workers = [
            asyncio.create_task(worker(f"worker-{i}", session, task_queue, statuses))
            for i in range(MAX_CONCURRENT)
        ]

        print(f"Sending {TOTAL_REQUESTS} requests with concurrency {MAX_CONCURRENT}...")
        start = time.time()

        await task_queue.join()
        end = time.time()

        for w in workers:
            await w

        print(f"Completed in {end - start:.2f} seconds")
        print(f"Created (201): {statuses[201]}  Conflict (409): {statuses[409]}  "
              f"Rejected (400/404): {statuses[400] + statuses[404]}  Other: "
              f"{sum(v for k, v in statuses.items() if k not in (201, 409, 400, 404))}")


if __name__ == "__main__":
    asyncio.run(main())
