#!/usr/bin/env python3
"""
Start the carousel renderer server.
"""

import uvicorn
from carousel.config import get_settings

settings = get_settings()

if __name__ == "__main__":
    print("=" * 50)
    print("Carousel Renderer")
    print("=" * 50)
    print(f"Starting server at http://{settings.host}:{settings.port}")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("=" * 50)

    uvicorn.run(
        "carousel.main:app",
        host=settings.host,
        port=settings.port,
        reload=True
    )
