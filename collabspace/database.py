from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from collabspace.config import settings
from collabspace.utils.logger import get_logger

logger = get_logger(__name__)

# Database connection pooling configuration
POOL_SIZE = 5          # Base connections per worker
MAX_OVERFLOW = 10      # Additional connections when needed
POOL_TIMEOUT = 30      # Seconds to wait for a free connection
POOL_RECYCLE = 1800    # Recycle connections every 30 minutes
POOL_PRE_PING = True   # Validate connections before use

# Global variables for lazy initialization
_engine = None
_session_local = None


def _connect_args(database_url: str) -> dict:
    """Driver-level timeouts so no persistence call can hang a request."""
    backend = make_url(database_url).get_backend_name()
    timeout = settings.DB_TIMEOUT_SECONDS
    if backend == "sqlite":
        # Sessions are handed across the threadpool by FastAPI
        return {"check_same_thread": False, "timeout": timeout}
    if backend == "postgresql":
        return {
            "connect_timeout": timeout,
            "options": f"-c statement_timeout={timeout * 1000}",
        }
    return {}


def get_engine():
    """Get database engine with lazy initialization for Gunicorn worker compatibility."""
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.DATABASE_URL,
            poolclass=QueuePool,
            pool_size=POOL_SIZE,
            max_overflow=MAX_OVERFLOW,
            pool_timeout=POOL_TIMEOUT,
            pool_recycle=POOL_RECYCLE,
            pool_pre_ping=POOL_PRE_PING,
            connect_args=_connect_args(settings.DATABASE_URL),
            echo=settings.DEBUG,  # Log SQL queries in debug mode
        )
        logger.info(
            f"Database pool configured: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, "
            f"pool_timeout={POOL_TIMEOUT}s, statement_timeout={settings.DB_TIMEOUT_SECONDS}s"
        )
    return _engine

def get_session_local():
    """Get SessionLocal with lazy initialization for Gunicorn worker compatibility."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _session_local

engine = get_engine()

Base = declarative_base()

def get_db():
    """
    Database dependency for FastAPI.
    Provides database session with automatic cleanup.
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        try:
            db.rollback()
        except Exception as rollback_error:
            logger.error(f"Error during rollback: {rollback_error}")
        logger.error(f"Pool status during error: {get_pool_status()}")
        raise
    finally:
        try:
            db.close()
        except Exception as close_error:
            logger.error(f"Error closing database session: {close_error}")

def get_pool_status():
    """Current connection pool status, for logs and the health probe."""
    try:
        pool = get_engine().pool
        return {
            "pool_size": pool.size(),
            "checked_in": pool.checkedin(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
            "pool_type": type(pool).__name__
        }
    except Exception as e:
        return {
            "error": f"Could not get pool status: {str(e)}",
            "pool_type": "unknown"
        }
