# app.py
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from static_docs_search.app import SearchEngine, query_text
from static_docs_search.config import SearchConfig, load_config

logger = logging.getLogger(__name__)


def create_app(cfg: Optional[SearchConfig] = None) -> FastAPI:
    cfg = cfg or load_config(os.getenv("DOCS_SEARCH_CONFIG", "config.yaml"))
    engine = SearchEngine(cfg)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        # load or build once, before the first query is served
        logger.info("Search index ready: %d chunks", len(engine.index))
        yield

    app = FastAPI(title="Docs search", version="0.1.0", lifespan=lifespan)
    app.state.engine = engine
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"ok": True, "documents": len(engine.index)}

    @app.post("/api/query")
    async def query(request: Request):
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse({"error": "Request body must be JSON."}, status_code=400)

        q = body.get("query") if isinstance(body, dict) else None
        if not q or not isinstance(q, str):
            return JSONResponse(
                {"error": "Invalid query. Provide a non-empty string."}, status_code=400
            )
        top_k = body.get("top_k")
        if top_k is not None and (not isinstance(top_k, int) or isinstance(top_k, bool) or top_k < 1):
            return JSONResponse({"error": "top_k must be a positive integer."}, status_code=400)

        try:
            # scoring is CPU-bound; keep it off the event loop
            return await run_in_threadpool(query_text, q, engine, top_k=top_k)
        except Exception:
            logger.exception("Error processing query %r", q)
            return JSONResponse({"error": "Internal server error."}, status_code=500)

    return app


app = create_app()
