import logging

from fastapi import FastAPI

from goalplanner.api.deps import get_app_settings

from goalplanner.api.routes.health import router as health_router
from goalplanner.api.routes.goals import router as goals_router
from goalplanner.api.routes.recommendations import router as recommendations_router


app = FastAPI(title="goalplanner API", version="0.1.0")


@app.on_event("startup")
def _configure_logging() -> None:
    settings = get_app_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


app.include_router(health_router)
app.include_router(goals_router)
app.include_router(recommendations_router)
