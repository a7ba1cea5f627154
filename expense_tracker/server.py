from __future__ import annotations

import uvicorn

from expense_tracker.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "expense_tracker.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
