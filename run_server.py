import uvicorn

from lanescope.config import LaneScopeConfig
from lanescope.logging_config import configure_logging

if __name__ == "__main__":
    config = LaneScopeConfig.from_env()
    configure_logging(config.log_level)

    print("Starting LaneScope API Server...")
    print("Docs available at: http://localhost:8000/docs")

    uvicorn.run(
        "lanescope.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
