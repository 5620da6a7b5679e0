import uvicorn

from studysharper.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "studysharper.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.APP_ENV == "dev",
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
