"""Run with: python -m leadsplit.website_api"""

import uvicorn
from .config import Settings
from .main import create_app

if __name__ == "__main__":
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
