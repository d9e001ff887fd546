"""Run the TaskFlow API with uvicorn."""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "taskflow.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
