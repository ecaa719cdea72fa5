from sqlalchemy import create_engine, Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker
from datetime import datetime
from packopt.config import DATABASE_URL, DEFAULT_PACK_SIZES

# 1. Database Base
Base = declarative_base()

# 2. Table Definitions (Declarative Base)

class PackSize(Base):
    """The active catalog of shippable pack sizes."""
    __tablename__ = 'pack_sizes'

    pack_size = Column(Integer, primary_key=True, autoincrement=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

class OptimizationLog(Base):
    """The Auditor: one row per optimization request, successful or not."""
    __tablename__ = 'optimization_logs'

    id = Column(Integer, primary_key=True)
    order_quantity = Column(Integer, nullable=True)
    total_items = Column(Integer, nullable=True)
    total_packs = Column(Integer, nullable=True)
    waste = Column(Integer, nullable=True)
    # Comma-joined snapshot of the catalog the request was solved against
    pack_sizes = Column(String, nullable=False)
    catalog_version = Column(Integer, nullable=False)
    status = Column(String, nullable=False) # e.g., 'OPTIMIZED', 'INVALID_QUANTITY', 'INFEASIBLE'
    message = Column(String, nullable=True)
    timestamp = Column(DateTime, default=datetime.now, nullable=False)


# 3. Setup and Seeding Functions


def initialize_db(engine=None):
    """Creates the database tables and seeds the default catalog."""

    if engine is None:
        engine = create_engine(DATABASE_URL)

    Base.metadata.create_all(engine)

    DBSession = sessionmaker(bind=engine)
    session = DBSession()
    try:
        # Only seed an empty catalog, never overwrite a configured one
        if session.query(PackSize).count() == 0:
            seed_data(session)
    finally:
        session.close()

    return engine

def seed_data(session, pack_sizes=DEFAULT_PACK_SIZES):
    """Inserts the default pack-size catalog."""
    try:
        session.add_all([PackSize(pack_size=size) for size in pack_sizes])
        session.commit()
    except Exception:
        session.rollback()
        raise

if __name__ == '__main__':
    initialize_db()
    print(f"Database ready at {DATABASE_URL}")
