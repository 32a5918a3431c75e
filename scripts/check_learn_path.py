"""Ask the running API for a learning path and print the reading order."""
import sys

import httpx

BASE = "http://localhost:8000/api/v1"
client = httpx.Client(timeout=15)

aliases = sys.argv[1:] or ["bayes_rule"]
r = client.post(f"{BASE}/learn", json={"page_aliases": aliases})
if r.status_code != 200:
    print(f"Error {r.status_code}: {r.text}")
    sys.exit(1)

data = r.json()
pages = data["pages"]


def title(page_id):
    page = pages.get(page_id)
    return page["title"] if page else page_id


print(f"=== Targets: {', '.join(title(p) for p in data['page_ids']) or '(all mastered)'} ===\n")

for page_id, req in data["requirements"].items():
    tutor = req["best_tutor_id"]
    taught = f"taught by {title(tutor)}" if tutor else "NOT TAUGHT"
    print(f"  {title(page_id)}: {taught} (cost {req['cost']})")

print("\nReading order:")
for i, page_id in enumerate(data["study_order"], 1):
    print(f"  {i}. {title(page_id)}")
