from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from ..app.config import Config

DATABASE_URL = Config.DATABASE_URL

# SQLite needs check_same_thread disabled for FastAPI's threadpool
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Create the SQLAlchemy engine
engine = create_engine(DATABASE_URL, connect_args=connect_args)

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create a base class for our models
Base = declarative_base()

def get_db():
    """Dependency to get a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables(bind=None):
    """Create all tables in the database."""
    # Import all models here before calling create_all
    # This ensures they are registered with the Base metadata
    from .models import KnowledgeBase, Conversation, Message, AnalyticsEvent
    Base.metadata.create_all(bind=bind or engine)

if __name__ == "__main__":
    create_tables()
    print("Database tables created successfully.")
