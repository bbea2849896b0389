#!/usr/bin/env python3
"""
multisite - Quick Start Script

Run this script to start the CMS server.
"""
import sys
import os

# Add the project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

if __name__ == "__main__":
    import uvicorn
    from multisite.config import get_settings

    settings = get_settings()

    print("=" * 50)
    print(settings.app_name)
    print("=" * 50)
    print(f"Server starting at http://{settings.host}:{settings.port}")
    print(f"Multi-site: {'on' if settings.multisite_enabled else 'off'}")
    print("=" * 50)

    uvicorn.run(
        "multisite.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
