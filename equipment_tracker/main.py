"""ASGI entry point: ``uvicorn equipment_tracker.main:app``."""

from prometheus_fastapi_instrumentator import Instrumentator

from equipment_tracker.core.config import settings
from equipment_tracker.core.logging import configure_logging
from equipment_tracker import app

configure_logging(settings.LOG_LEVEL)
Instrumentator().instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}


def run() -> None:
    import uvicorn

    uvicorn.run("equipment_tracker.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
