import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from receiptsieve import __version__
from receiptsieve.config import settings
from receiptsieve.routers import extract, filter as filter_router
from receiptsieve.services.filter import ReceiptFilter
from receiptsieve.services.pipeline import ReceiptPipeline

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="ReceiptSieve API",
    description="Receipt detection and transaction field extraction",
    version=__version__,
    debug=settings.DEBUG,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One dedup cache per process
app.state.receipt_filter = ReceiptFilter()
app.state.pipeline = ReceiptPipeline()


@app.get("/")
async def root():
    return {
        "message": settings.APP_NAME,
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


app.include_router(extract.router)
app.include_router(filter_router.router)
