"""Launch the TrueCheck[AI] FastAPI server."""
import uvicorn

from truecheck import config

if __name__ == "__main__":
    uvicorn.run(
        "truecheck.api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=False,
        log_level=config.LOG_LEVEL,
    )
