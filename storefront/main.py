# storefront/main.py
import uvicorn

from storefront.api import create_app
from storefront.data.database import Base, engine, init_db
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

logger.info("Initializing database...")

try:
    init_db()
    logger.info(f"Database tables ready: {sorted(Base.metadata.tables.keys())}")
except Exception as e:
    logger.error(f"Failed to create tables on {engine.url.render_as_string(hide_password=True)}: {e}")
    raise


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
