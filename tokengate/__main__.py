"""
Run the API server:

  python -m tokengate

Listens on HOST:PORT from the environment (default 0.0.0.0:3000).
"""

import logging

import uvicorn
from dotenv import load_dotenv

from tokengate.core.config import get_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def main() -> None:
    load_dotenv()
    settings = get_settings()
    uvicorn.run(
        "tokengate.main:get_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.APP_ENV == "dev" and settings.DEBUG,
    )


if __name__ == "__main__":
    main()
