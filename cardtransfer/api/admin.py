from fastapi import APIRouter, Body, Depends, HTTPException

from cardtransfer import config
from cardtransfer.db.seed import seed_demo_data
from cardtransfer.logging_config import get_logger
from .deps import get_db

logger = get_logger("cardtransfer.api.admin")

router = APIRouter(tags=["admin"])


@router.post("/admin/seed")
async def seed_demo(token: str = Body(..., embed=True), db=Depends(get_db)):
    """
    Idempotent seeding of the reference user and cards.
    Protected by SIMPLE_ADMIN_TOKEN in environment.
    """
    if token != config.SIMPLE_ADMIN_TOKEN:
        logger.warning("Admin seed unauthorized attempt")
        raise HTTPException(status_code=401, detail="Unauthorized")
    return await seed_demo_data(db)
