from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request

from stat_agent.collectors.errors import FatalCollectorError
from stat_agent.engine.assembler import sample, traffic_source

logger = logging.getLogger(__name__)

router = APIRouter()


# ── REST routes ───────────────────────────────────────


@router.get("/api/snapshot")
def get_snapshot(request: Request) -> dict:
    # sync route: collectors block, so this runs in the threadpool
    state = request.app.state
    try:
        snapshot = sample(state.settings, state.cpu_state, state.net_state)
    except FatalCollectorError as exc:
        logger.critical("Sampling pass aborted: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    return snapshot.model_dump(mode="json")


@router.get("/api/status")
async def get_status(request: Request) -> dict:
    state = request.app.state
    samplers = getattr(state, "samplers", [])
    return {
        "status": "running",
        "traffic_source": traffic_source(state.settings).value,
        "samplers": [
            {"name": s.name, "running": s.running, "interval": s.interval}
            for s in samplers
        ],
    }
