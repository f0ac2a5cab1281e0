"""Run the API with uvicorn. Host, port and log level come from the environment (.env)."""
import os

import uvicorn

from pharmacy_pos.core.config import settings

if __name__ == "__main__":
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting Pharmacy POS backend on http://{host}:{port} ({settings.ENVIRONMENT})")
    uvicorn.run(
        "pharmacy_pos.main:app",
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG and os.getenv("RELOAD", "false").lower() == "true",
    )
