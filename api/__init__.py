"""
Minimal API (FastAPI)

HTTP API for review dataset integrity:
- POST /verify/proof - Verify an inclusion proof
- POST /roots/compare - Compare two roots
- GET /roots, GET /roots/{label} - Read the root log
- POST /roots/{label}/check - Check a candidate root
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
