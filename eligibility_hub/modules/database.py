import logging
import os
from databases import Database
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("eligibility_hub.database")


def _build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    user = os.getenv("DB_USER", "postgres")
    password = os.getenv("DB_PASSWORD", "password")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "insurance_eligibility_db")
    return f"postgresql://{user}:{password}@{host}:{port}/{name}"


DATABASE_URL = _build_database_url()

# Create the database instance
database = Database(DATABASE_URL)

async def connect_to_db():
    await database.connect()

async def disconnect_from_db():
    await database.disconnect()

async def check_connection(db: Database = None) -> bool:
    """Run a trivial query to confirm the database answers."""
    db = db or database
    try:
        now = await db.fetch_val("SELECT CURRENT_TIMESTAMP")
        logger.info(f"Database connected successfully: {now}")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
