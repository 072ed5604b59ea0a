"""
Storefront Service Application

Local cart, order history and checkout wizard for the Atomic storefront,
backed by the remote storefront REST API for products and accounts.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from .core.config import settings
from .database import CartDatabase, OrderDatabase, get_store
from .routes import products_router, cart_router, checkout_router, orders_router, auth_router
from .routes.deps import get_account_service, get_client

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Storefront starting up...")
    logger.info(f"Storefront API: {settings.api_base_url}")
    logger.info(f"Store backend: {settings.store_backend} ({settings.store_path})")

    store = get_store()
    recovered = await OrderDatabase(store).recover_pending(CartDatabase(store))
    if recovered:
        logger.info(f"Recovered interrupted checkout for order {recovered}")

    if await get_account_service().restore():
        logger.info("Restored saved session token")

    yield

    logger.info("Storefront shutting down...")
    await get_client().close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Cart, order history and checkout for the Atomic storefront",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(orders_router)
app.include_router(auth_router)


@app.get("/")
async def home():
    """Service index"""
    return {
        "message": "Storefront API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
            "checkout": "/api/checkout",
            "orders": "/api/orders",
            "profile": "/api/profile",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "storefront"}


def run() -> None:
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
