"""
Shop Ledger HTTP server

Serves the JSON API consumed by the dashboard frontend.

Run with:
    python app/main.py
or:
    uvicorn app.main:app --reload
"""

import uvicorn

from shopledger.api import create_app
from shopledger.config import get_settings


app = create_app()


if __name__ == "__main__":
    settings = get_settings().app
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
