import logging

from fastapi import FastAPI

from stripe_cartridge.account import router as account_router
from stripe_cartridge.config import LOG_LEVEL
from stripe_cartridge.database import Base, engine
from stripe_cartridge.routes import hooks_router, router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Stripe Payments Cartridge")

app.include_router(router)
app.include_router(hooks_router)
app.include_router(account_router)

Base.metadata.create_all(bind=engine)
