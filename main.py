from fastapi import FastAPI

from shared.config.database import AsyncSessionLocal, Base, engine
from shared.errors import EShopError, eshop_error_handler
from shared.observability import setup_observability

# IMPORTANT: import models so they register with Base
from services.auth_service import models as auth_models  # noqa: F401
from services.product_service import models as product_models  # noqa: F401
from services.order_service import models as order_models  # noqa: F401
from services.wallet_service import models as wallet_models  # noqa: F401

from services.auth_service.router import router as auth_router, public_router
from services.auth_service.service import AuthService
from services.product_service.router import router as product_router
from services.order_service.router import router as order_router
from services.wallet_service.router import router as wallet_router, transactions_router
from services.overview_service.router import router as overview_router

app = FastAPI(
    title="eShop Admin API",
    version="1.0.0",
    description="Back office: inventory, orders with stock reservation, wallet ledger.",
)

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, "eshop_admin")

# --- ERROR MAPPING ---
app.add_exception_handler(EShopError, eshop_error_handler)

app.include_router(public_router)
app.include_router(auth_router)
app.include_router(product_router)
app.include_router(order_router)
app.include_router(wallet_router)
app.include_router(transactions_router)
app.include_router(overview_router)


@app.on_event("startup")
async def startup_event():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        await AuthService.seed_admin(db)
