#!/usr/bin/env python
"""
Start script - runs the FastAPI service
"""

import uvicorn
from promo_studio.config import get_settings


def main():
    """Start the service"""
    settings = get_settings()

    uvicorn.run(
        "promo_studio.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
