from __future__ import annotations

import logging
import os

import uvicorn

from bouquet_ai.core.config import PORT


def main() -> None:
    level = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger(__name__).info("Server su http://localhost:%d", PORT)
    uvicorn.run("bouquet_ai.main:app", host="0.0.0.0", port=PORT, log_config=None)


if __name__ == "__main__":
    main()
