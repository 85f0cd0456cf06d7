import os

import uvicorn

from comfortboard.core.config import load_settings
from comfortboard.core.logging import configure_logging


def main() -> None:
    configure_logging(load_settings())
    reload_enabled = os.getenv("APP_ENV", "development").lower() != "production"
    uvicorn.run(
        "comfortboard.factory:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "5000")),
        reload=reload_enabled,
        log_config=None,
    )


if __name__ == "__main__":
    main()
