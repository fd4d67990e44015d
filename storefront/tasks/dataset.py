# storefront/tasks/dataset.py
from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.data.seed import read_dataset, load_dataset
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.dataset.load_dataset_task")
def load_dataset_task(path: str | None = None):
    logger.info("Load dataset task started")

    db = SessionLocal()
    try:
        count = load_dataset(db, read_dataset(path))
    finally:
        db.close()

    return {"products": count}
