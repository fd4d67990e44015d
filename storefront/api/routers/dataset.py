# storefront/api/routers/dataset.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.seed import clear_dataset
from storefront.domain.schemas import MessageOut
from storefront.tasks.dataset import load_dataset_task
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/dataset", tags=["dataset"])


@router.post("/load", response_model=MessageOut, status_code=202)
def load_dataset():
    """Ladowanie katalogu idzie do workera celery."""
    try:
        result = load_dataset_task.delay()
    except Exception:
        logger.exception("Failed to schedule dataset load")
        raise HTTPException(status_code=500, detail="Failed to load dataset.")

    logger.info(f"Dataset load task {result.id} scheduled")
    return {"message": "Dataset load scheduled."}


@router.post("/clear", response_model=MessageOut)
def clear(db: Session = Depends(get_db)):
    try:
        clear_dataset(db)
    except Exception:
        logger.exception("Failed to clear dataset")
        raise HTTPException(status_code=500, detail="Failed to clear dataset.")
    return {"message": "Dataset cleared successfully."}
