from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from redis.exceptions import RedisError
from typing import Dict, List, Optional

from karma.config import load_config, redis_url
from karma.engine import KarmaEngine
from karma.models import User

import logging

# ============================================================
# LOGGING
# ============================================================

logger = logging.getLogger("karma.server")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

# ============================================================
# Models
# ============================================================

class ModifyRequest(BaseModel):
    user_id: str
    user_name: Optional[str] = None

class LinkRequest(BaseModel):
    other: str

class TermResponse(BaseModel):
    term: str
    own_score: int
    total_score: int
    links: Dict[str, int]
    text: str

class ModifyResponse(BaseModel):
    term: str
    applied: bool
    score: Optional[int]
    ttl: int
    text: str

class LinkResponse(BaseModel):
    source: str
    target: str
    linked: bool
    created: bool
    threshold: Optional[int]
    text: str

class RankedTerm(BaseModel):
    term: str
    score: int

class LeaderboardResponse(BaseModel):
    direction: str
    terms: List[RankedTerm]


# ============================================================
# Engine Factory
# ============================================================

def build_engine() -> KarmaEngine:
    config = load_config()
    logger.info("[SERVER] Building engine from environment")
    return KarmaEngine.create(redis_url=redis_url(), config=config)


# ============================================================
# FastAPI App
# ============================================================

def create_app(engine: Optional[KarmaEngine] = None) -> FastAPI:
    """
    HTTP adapter over a KarmaEngine.

    Run with ``uvicorn --factory karma.server.app:create_app``; without
    an explicit engine one is built from KARMA_* environment variables.
    """
    engine = engine or build_engine()

    app = FastAPI(title="Karma Engine", version="1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RedisError)
    async def backend_failure(request: Request, exc: RedisError):
        logger.exception("[SERVER] Backend failure | path=%s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Karma store unavailable"},
        )

    # --------------------------------------------------------
    # Health
    # --------------------------------------------------------

    @app.get("/health")
    def health():
        return {
            "status": "ok" if engine.health() else "degraded",
            "link_karma_threshold": engine.config.link_karma_threshold,
            "cooldown": engine.config.cooldown,
            "decay": engine.actions.enabled,
        }

    # --------------------------------------------------------
    # Terms
    # --------------------------------------------------------

    @app.get("/terms/{term}", response_model=TermResponse)
    def check_term(term: str, show_all: bool = True):
        target = engine.term(term)
        links = target.links_with_scores() if show_all else target.links_with_non_zero_scores()
        return TermResponse(
            term=target.name,
            own_score=target.own_score,
            total_score=target.total_score,
            links=links,
            text=target.check(show_all),
        )

    def _modify(term: str, request: ModifyRequest, delta: int) -> ModifyResponse:
        user = User(id=request.user_id, name=request.user_name or "")
        result = engine.term(term).modify(user, delta)

        text = result.text if result.applied else result.message.render(engine.translate)
        return ModifyResponse(
            term=result.term,
            applied=result.applied,
            score=result.score,
            ttl=result.ttl,
            text=text,
        )

    @app.post("/terms/{term}/increment", response_model=ModifyResponse)
    def increment(term: str, request: ModifyRequest):
        return _modify(term, request, 1)

    @app.post("/terms/{term}/decrement", response_model=ModifyResponse)
    def decrement(term: str, request: ModifyRequest):
        return _modify(term, request, -1)

    @app.delete("/terms/{term}")
    def delete_term(term: str):
        target = engine.term(term)
        target.delete()
        return {
            "status": "deleted",
            "term": target.name,
            "text": engine.translate("delete_success", term=target.name),
        }

    @app.get("/terms/{term}/modified")
    def modified(term: str):
        target = engine.term(term)
        return {
            "term": target.name,
            "modified": [
                {"user": str(user), "count": count}
                for user, count in target.modified()
            ],
        }

    # --------------------------------------------------------
    # Links
    # --------------------------------------------------------

    @app.post("/terms/{term}/links", response_model=LinkResponse)
    def link(term: str, request: LinkRequest):
        source = engine.term(term)
        target = engine.term(request.other)
        outcome = source.link(target)

        if outcome.refused:
            text = engine.translate(
                "threshold_not_satisfied",
                threshold=outcome.threshold,
                count=outcome.threshold,
            )
        else:
            text = engine.translate("link_success", source=source.name, target=target.name)

        return LinkResponse(text=text, **outcome.to_dict())

    @app.delete("/terms/{term}/links/{other}")
    def unlink(term: str, other: str):
        source = engine.term(term)
        target = engine.term(other)
        removed = source.unlink(target)

        return {
            "source": source.name,
            "target": target.name,
            "unlinked": removed,
            "text": engine.translate("unlink_success", source=source.name, target=target.name)
            if removed else "",
        }

    # --------------------------------------------------------
    # Leaderboards
    # --------------------------------------------------------

    @app.get("/leaderboard/best", response_model=LeaderboardResponse)
    def best(n: int = 5):
        return LeaderboardResponse(
            direction="best",
            terms=[RankedTerm(term=t, score=s) for t, s in engine.best_terms(n)],
        )

    @app.get("/leaderboard/worst", response_model=LeaderboardResponse)
    def worst(n: int = 5):
        return LeaderboardResponse(
            direction="worst",
            terms=[RankedTerm(term=t, score=s) for t, s in engine.worst_terms(n)],
        )

    return app
