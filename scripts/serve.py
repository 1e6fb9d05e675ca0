"""Run the chat history service with uvicorn."""

import uvicorn

from app.core.config import settings


def main() -> None:
    uvicorn.run(
        "app.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.is_development,
        reload_dirs=["app"],
    )


if __name__ == "__main__":
    main()
