from __future__ import annotations

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from core.metrics import MetricsLogger, Timer
from core.render import page_url, render_page
from core.store import PageNotFound, StoreSlot, StoreUnavailable

# Demo page created before serving. Set SEED_PAGE="" to start with no store at all.
SEED_PAGE = os.getenv("SEED_PAGE", "hello-world")
EVENTS_LOG = os.getenv("EVENTS_LOG", "results/events.jsonl")
# Off by default: comments are rendered raw (known stored-XSS defect).
ESCAPE_HTML = os.getenv("ESCAPE_HTML", "0") == "1"

slot = StoreSlot()
metrics = MetricsLogger(EVENTS_LOG)


def seed_store(page_id: str) -> None:
    store = slot.get_or_init()
    store.ensure_page(page_id)
    metrics.event("page_created", page_id, comment_count=0, detail="seed")


@asynccontextmanager
async def lifespan(_: FastAPI):
    if SEED_PAGE:
        seed_store(SEED_PAGE)
    yield


app = FastAPI(lifespan=lifespan)


@app.get("/")
def home():
    try:
        pages = len(slot.get())
    except StoreUnavailable:
        pages = None
    return {
        "status": "ok",
        "pages": pages,
        "endpoints": ["/pages", "/pages/{page_id}", "/pages/{page_id}/comments"],
    }


# Page ids may contain "/" (sent as %2F), so every page route takes a path param.
# The comments routes are registered before the view route.
@app.get("/pages/{page_id:path}/comments")
def get_comments(page_id: str, request: Request):
    raw_path = request.scope.get("raw_path") or b""
    if raw_path and not raw_path.endswith(b"/comments"):
        # encoded suffix, e.g. /pages/x%2Fcomments is the view of page "x/comments"
        return get_page(page_id + "/comments")
    # unconditional, the page may not exist
    return RedirectResponse(page_url(page_id), status_code=308)


@app.post("/pages/{page_id:path}/comments")
def post_comment(page_id: str, user: str = Form(""), body: str = Form("")):
    # maxlength/pattern live only in the HTML form; anything is accepted here
    store = slot.get_or_init()
    store.append_comment(page_id, user, body)
    metrics.event(
        "comment_posted",
        page_id,
        status=303,
        detail=f"user_len={len(user)} body_len={len(body)}",
    )
    return RedirectResponse(page_url(page_id), status_code=303)


@app.get("/pages/{page_id:path}", response_class=HTMLResponse)
def get_page(page_id: str):
    with Timer() as t:
        try:
            comments = slot.get().lookup_comments(page_id)
        except StoreUnavailable:
            metrics.event("store_unavailable", page_id, status=500)
            raise HTTPException(status_code=500, detail="Internal Server Error")
        except PageNotFound:
            metrics.event("page_missing", page_id, status=404)
            raise HTTPException(status_code=404, detail="Not Found")
        body = render_page(page_id, comments, escape=ESCAPE_HTML)

    metrics.event("page_viewed", page_id, latency_ms=t.ms, comment_count=len(comments))
    return HTMLResponse(body)


@app.post("/pages")
async def post_page(request: Request):
    page_id = (await request.body()).decode("utf-8", errors="replace")
    store = slot.get_or_init()
    existed = store.has_page(page_id)
    comments = store.ensure_page(page_id)
    event = "page_exists" if existed else "page_created"
    metrics.event(event, page_id, status=303, comment_count=len(comments))
    return RedirectResponse(page_url(page_id), status_code=303)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "8000")))
