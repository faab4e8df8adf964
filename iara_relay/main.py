from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from iara_relay.core.config import get_settings
from iara_relay.core.log import setup_logging
from iara_relay.api.v1.router import api_router

settings = get_settings()
logger = setup_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(
    api_router,
    prefix="/api/v1"
)


@app.get("/health", tags=["Health"], response_class=PlainTextResponse)
def health_check():
    return "OK"


if __name__ == "__main__":
    import uvicorn
    logger.info("WhatsApp relay online on port %s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
