from __future__ import annotations

import uvicorn

from companies_api.config import settings


def main() -> None:
    uvicorn.run(
        "companies_api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
