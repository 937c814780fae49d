"""Run the HTTP service: ``python -m link_validator``."""

import uvicorn

from link_validator.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "link_validator.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
