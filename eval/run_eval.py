import json
import os
import time
import httpx

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")
TASKS_PATH = os.path.join(os.path.dirname(__file__), "tasks.json")

def count_comment_blocks(html: str) -> int:
    return (html or "").count('class="comment"')

def send_step(client, step):
    method = step.get("method", "GET").upper()
    kwargs = {}
    if "form" in step:
        kwargs["data"] = step["form"]
    if "content" in step:
        kwargs["content"] = step["content"].encode("utf-8")
    return client.request(method, step["path"], follow_redirects=False, **kwargs)

def score_step(r, step) -> int:
    if "expect_status" in step and r.status_code != step["expect_status"]:
        return 0
    if "expect_location" in step and r.headers.get("location") != step["expect_location"]:
        return 0
    for needle in step.get("expect_contains", []):
        if needle not in r.text:
            return 0
    if "expect_count" in step and count_comment_blocks(r.text) != step["expect_count"]:
        return 0
    return 1

def run_tasks(client, tasks):
    """Run every task's steps in order. A task passes only if all its steps pass."""
    results = []
    for t in tasks:
        start = time.time()
        ok = 1
        failed_step = None
        for i, step in enumerate(t["steps"]):
            r = send_step(client, step)
            if not score_step(r, step):
                ok = 0
                failed_step = {"index": i, "status": r.status_code, "location": r.headers.get("location")}
                break
        dur_ms = int((time.time() - start) * 1000)
        results.append({"id": t["id"], "passed": bool(ok), "latency_ms": dur_ms, "failed_step": failed_step})
        print(f"{t['id']}: {'PASS' if ok else 'FAIL'} | {dur_ms}ms")
    return results

def summarize(results):
    total = len(results)
    passed = sum(1 for r in results if r["passed"])
    return {
        "task_success_pct": round(100.0 * passed / max(1, total), 2),
        "avg_latency_ms": int(sum(r["latency_ms"] for r in results) / max(1, total)),
        "num_tasks": total,
        "passed": passed,
    }

def main():
    print(f"[eval] BASE_URL={BASE_URL}")

    with open(TASKS_PATH, "r", encoding="utf-8") as f:
        tasks = json.load(f)

    print(f"[eval] loaded {len(tasks)} tasks")

    os.makedirs("results", exist_ok=True)

    with httpx.Client(base_url=BASE_URL, timeout=10) as client:
        results = run_tasks(client, tasks)

    summary = summarize(results)
    with open("results/eval.json", "w", encoding="utf-8") as f:
        json.dump({"summary": summary, "results": results}, f, indent=2)

    print("\nSummary:", summary)
    print("[eval] wrote results/eval.json")

if __name__ == "__main__":
    main()
