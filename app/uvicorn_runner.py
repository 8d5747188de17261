from __future__ import annotations

import os

import uvicorn


def main():
    uvicorn.run(
        "app.main:app",
        host=os.getenv("PITR_HOST", "127.0.0.1"),
        port=int(os.getenv("PITR_PORT", "8000")),
        log_level=os.getenv("PITR_LOG_LEVEL", "info"),
        reload=False,
    )


if __name__ == "__main__":
    main()
