"""Entry: start the API server; login and polling run in the app lifespan."""
import uvicorn

from nostrplaying.config import API_HOST, API_PORT, LOG_LEVEL


def main() -> None:
    uvicorn.run(
        "nostrplaying.api.app:app",
        host=API_HOST,
        port=API_PORT,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
