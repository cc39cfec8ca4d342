import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rewards_platform.config import get_settings
from rewards_platform.db import engine, Base

from rewards_platform.models.business import Business
from rewards_platform.models.reward import Reward
from rewards_platform.models.points_ledger_entry import PointsLedgerEntry
from rewards_platform.models.redemption import Redemption

from rewards_platform.routes.businesses import router as businesses_router
from rewards_platform.routes.rewards import router as rewards_router
from rewards_platform.routes.ledger import router as ledger_router
from rewards_platform.routes.redemptions import router as redemptions_router
from rewards_platform.routes.admin import router as admin_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Family Rewards Platform")

# ─── CORS ─────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def startup():
    Base.metadata.create_all(bind=engine)
    logger.info("rewards platform started", extra={"database": engine.url.render_as_string(hide_password=True)})


app.include_router(businesses_router)
app.include_router(rewards_router)
app.include_router(ledger_router)
app.include_router(redemptions_router)
app.include_router(admin_router)


@app.get("/")
def read_root():
    return {"message": "Family Rewards Platform is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8001)
