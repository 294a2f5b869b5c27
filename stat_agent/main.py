from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from stat_agent.api.routes import router
from stat_agent.collectors.procfs import InterfaceFilter
from stat_agent.config import settings
from stat_agent.engine import CpuPercentState, CpuSampler, NetSpeedSampler, NetSpeedState

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── startup ───────────────────────────────────────
    proc = Path(settings.proc_root)
    cpu_state = CpuPercentState()
    net_state = NetSpeedState()

    samplers = [
        CpuSampler(cpu_state, proc / "stat", interval=settings.sample_interval),
        NetSpeedSampler(
            net_state,
            proc / "net" / "dev",
            InterfaceFilter(settings.iface_ignore),
            interval=settings.sample_interval,
        ),
    ]
    for s in samplers:
        await s.start()

    # Store on app.state for route access
    app.state.settings = settings
    app.state.cpu_state = cpu_state
    app.state.net_state = net_state
    app.state.samplers = samplers

    logger.info("Stat agent %s started, %d samplers active", settings.version, len(samplers))

    yield

    # ── shutdown ──────────────────────────────────────
    for s in samplers:
        await s.stop()
    logger.info("Stat agent shut down")


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

app.include_router(router)
