"""
SymSolver entry point.

Serve the SymSolver API with uvicorn.
"""

import uvicorn

from backend.app.config import settings


def main() -> None:
    uvicorn.run(
        "backend.app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
