from __future__ import annotations

import logging
import os
import uuid
from typing import Any

from fastapi import Body, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .catalog.data_store import get_catalog
from .catalog.models import BuildMethod
from .errors import CatalogUnavailable, InvalidPreferenceValue
from .recommendations.coverage import DIMENSIONS, CoverageReport, coverage_report
from .recommendations.engine import get_engine
from .recommendations.models import (
    CocktailOut,
    FlavorJourneyRequest,
    FlavorJourneyResponse,
    RecommendationResponse,
    ResetResponse,
    parse_preferences,
)
from .recommendations.slot_machine import (
    FLAVOR_ATTRIBUTES,
    MOOD_ATTRIBUTES,
    STYLE_ATTRIBUTES,
    SlotSpin,
    slot_to_preferences,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Cocktail Match API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "cocktail-match-secret-change-in-production"),
)


def _session_id(request: Request) -> str:
    """Per-browser recency key, created on first use."""
    sid = request.session.get("sid")
    if not sid:
        sid = uuid.uuid4().hex
        request.session["sid"] = sid
    return sid


# ── Error mapping ────────────────────────────────────────────────────────


@app.exception_handler(CatalogUnavailable)
async def catalog_unavailable(request: Request, exc: CatalogUnavailable) -> JSONResponse:
    logger.warning("Catalog unavailable: %s", exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Cocktail catalog unavailable, please try again", "reason": str(exc)},
    )


@app.exception_handler(InvalidPreferenceValue)
async def invalid_preference(request: Request, exc: InvalidPreferenceValue) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "fields": exc.fields})


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    catalog = get_catalog()
    return {
        "total_cocktails": len(catalog),
        "spirits": sorted({c.base_spirit_category for c in catalog if c.base_spirit_category}),
        "styles": sorted({c.style for c in catalog if c.style}),
        "build_methods": [m.value for m in BuildMethod],
        "preferences": {name: [m.value for m in enum] for name, enum in DIMENSIONS},
        "slot_reels": {
            "flavor": list(FLAVOR_ATTRIBUTES),
            "mood": list(MOOD_ATTRIBUTES),
            "style": list(STYLE_ATTRIBUTES),
        },
    }


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(
    request: Request,
    body: dict[str, Any] | None = Body(default=None),
    max_adjacent: int = Query(default=8, ge=0, le=8),
) -> RecommendationResponse:
    prefs = parse_preferences(body)
    result = get_engine().recommend(prefs, max_adjacent=max_adjacent, session_id=_session_id(request))
    return RecommendationResponse.from_result(result)


@app.get("/recommendations/random", response_model=CocktailOut)
def random_recommendation(request: Request) -> CocktailOut:
    return CocktailOut.from_entity(get_engine().recommend_random(_session_id(request)))


@app.post("/recommendations/slot", response_model=RecommendationResponse)
def slot_recommendation(
    body: SlotSpin,
    request: Request,
    max_adjacent: int = Query(default=8, ge=0, le=8),
) -> RecommendationResponse:
    prefs = slot_to_preferences(body)
    result = get_engine().recommend(prefs, max_adjacent=max_adjacent, session_id=_session_id(request))
    return RecommendationResponse.from_result(result)


@app.post("/recency/reset", response_model=ResetResponse)
def reset_recency(request: Request) -> ResetResponse:
    sid = _session_id(request)
    get_engine().reset_recency(sid)
    return ResetResponse(status="reset", session_id=sid)


# ── Flavor journey ───────────────────────────────────────────────────────


@app.post("/flavor-journey", response_model=FlavorJourneyResponse)
def flavor_journey(body: FlavorJourneyRequest, request: Request) -> FlavorJourneyResponse:
    cocktails = get_engine().flavor_journey(
        body.spirit,
        flavor_family=body.flavor_family,
        specific_flavor=body.specific_flavor,
        session_id=_session_id(request),
    )
    return FlavorJourneyResponse(
        cocktails=[CocktailOut.from_entity(c) for c in cocktails],
        total=len(cocktails),
    )


@app.post("/flavor-journey/reset", response_model=ResetResponse)
def reset_flavor_journey(request: Request) -> ResetResponse:
    sid = _session_id(request)
    get_engine().reset_flavor_journey(sid)
    return ResetResponse(status="reset", session_id=sid)


# ── Catalog tooling ──────────────────────────────────────────────────────


@app.get("/catalog/coverage", response_model=CoverageReport)
def catalog_coverage(min_matches: int = Query(default=3, ge=1, le=5)) -> CoverageReport:
    return coverage_report(get_catalog(), min_matches=min_matches)
