# backend/timekeeper/__main__.py
# python -m timekeeper  /  timekeeper-server

import uvicorn

from timekeeper.core.config import settings


def main() -> None:
    uvicorn.run(
        "timekeeper.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=not settings.is_production,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
