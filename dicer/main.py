from __future__ import annotations

from fastapi import FastAPI

from dicer.config import settings
from dicer.routers import rolls

app = FastAPI(title="Dicer", debug=settings.debug_enabled)

app.include_router(rolls.router)
