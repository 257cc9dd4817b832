from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from shared.core.config import DIRECTORY_DATABASE_URL, settings

Base = declarative_base()

POOL_SIZE = 5
MAX_OVERFLOW = 5


def build_engine(url: str):
    if url.startswith("sqlite"):
        # SQLite needs check_same_thread=False for FastAPI's threadpool
        return create_engine(url, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=POOL_SIZE,          # max idle connections
        max_overflow=MAX_OVERFLOW,      # max temporary extra connections
        pool_timeout=settings.DB_POOL_TIMEOUT,  # wait time before failing
        connect_args={
            "connect_timeout": 10,
            # bounded wait for every statement issued by a request
            "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
        },
    )


engine = build_engine(DIRECTORY_DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
