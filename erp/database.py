from sqlalchemy import BigInteger, Integer, create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker
from erp.config import settings

# Base class for all models
Base = declarative_base()

# SQLite only autoincrements an INTEGER PRIMARY KEY
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


def build_engine(url: str):
    """Create an engine with pool settings suited to the backend."""
    if url.startswith("sqlite"):
        # Worker threads share the file; wait on the write lock instead of failing
        return create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
            echo=False,
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=False,  # Set True to see SQL queries
    )


# Database engine
engine = build_engine(settings.DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# FastAPI dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Create any missing tables."""
    import erp.models  # noqa: F401  registers every mapper on Base
    Base.metadata.create_all(bind=bind or engine)
