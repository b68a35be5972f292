from fastapi import FastAPI
from cars_anpr.api.routers import router
from cars_anpr.core.config import settings
from cars_anpr.core.logging_setup import setup_logging


setup_logging(settings.log_level)

app = FastAPI(title="Cars Classification & ANPR Service", version="1.0.0")
app.include_router(router)
