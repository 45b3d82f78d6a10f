#!/usr/bin/env python3
"""
healtara - Quick Start Script

Run this script to start the healtara server.
"""
import sys
import os

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if __name__ == "__main__":
    import uvicorn
    from healtara.config import get_settings

    settings = get_settings()

    print("=" * 50)
    print("healtara")
    print("=" * 50)
    print(f"Server starting at http://{settings.host}:{settings.port}")
    print(f"Primary domain: {settings.primary_domain or '(not set)'}")
    print(f"Directory: {settings.directory_backend}")
    print("=" * 50)

    uvicorn.run(
        "healtara.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
