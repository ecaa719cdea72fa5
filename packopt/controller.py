# packopt/controller.py

import logging
import threading
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from db.setup import initialize_db, PackSize as DBSQLAPackSize, OptimizationLog
from packopt.config import DATABASE_URL, MAX_PACK_SIZE
from packopt.algorithms import solve, validate_pack_sizes
from packopt.errors import PackOptimizerError, InvalidQuantity, InvalidPackSizes, Infeasible
from packopt.models import PackingResult

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    InvalidQuantity: 'INVALID_QUANTITY',
    InvalidPackSizes: 'INVALID_PACK_SIZES',
    Infeasible: 'INFEASIBLE',
}


# --- The "Control Tower" (Singleton Pattern) ---
class PackMaster:
    """
    The Catalog Controller: Implemented as a Singleton.
    It is the single source of truth for the active pack-size catalog and
    keeps the audit trail of every optimization request.

    The catalog is held as an immutable (version, sizes) pair that is replaced
    as a whole on update. Each optimization reads it once, so a concurrent
    update never changes the catalog of a request already in flight.
    """
    _instance = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, database_url: str | None = None):
        # Prevent re-initialization if already done
        if hasattr(self, '_initialized') and self._initialized:
            if database_url is not None and database_url != self.database_url:
                logger.warning("PackMaster already connected to %s; ignoring %s. Call PackMaster.reset() first.",
                               self.database_url, database_url)
            return

        self.database_url = database_url or DATABASE_URL
        logger.info("Initializing PackMaster: connecting to %s", self.database_url)

        # 1. Database Connection
        # NullPool: SQLite file databases lock up under pooled connections
        if self.database_url.startswith('sqlite'):
            self.engine = create_engine(self.database_url, poolclass=NullPool)
        else:
            self.engine = create_engine(self.database_url)
        initialize_db(self.engine)
        self.DBSession = sessionmaker(bind=self.engine)

        # 2. Catalog snapshot; writers serialize on the lock, readers never wait
        self._update_lock = threading.Lock()
        self._catalog = (1, self._load_pack_sizes())

        self._initialized = True
        logger.info("PackMaster initialized with pack sizes %s.", list(self.pack_sizes))

    @classmethod
    def reset(cls):
        """Forgets the singleton so the next construction reconnects."""
        if cls._instance is not None and getattr(cls._instance, '_initialized', False):
            cls._instance.engine.dispose()
        cls._instance = None

    @property
    def pack_sizes(self) -> tuple:
        return self._catalog[1]

    @property
    def catalog_version(self) -> int:
        return self._catalog[0]

    def get_pack_sizes(self) -> tuple:
        """Current catalog, largest pack first. Safe to hold on to."""
        return self._catalog[1]

    def _load_pack_sizes(self) -> tuple:
        """
        Loads the persisted catalog, sorted largest first.
        """
        session = self.DBSession()
        try:
            rows = session.query(DBSQLAPackSize).all()
            return tuple(sorted((r.pack_size for r in rows), reverse=True))
        finally:
            session.close()

    # ====================================================================
    # CATALOG CONFIGURATION
    # ====================================================================

    def update_pack_sizes(self, pack_sizes, max_size: int | None = MAX_PACK_SIZE) -> tuple:
        """
        Replaces the catalog. The new sizes are validated with the same rules
        the optimizer applies, persisted in one transaction, and only then
        swapped in as the new snapshot.
        """
        new_sizes = validate_pack_sizes(pack_sizes, max_size=max_size)

        with self._update_lock:
            session = self.DBSession()
            try:
                session.query(DBSQLAPackSize).delete()
                session.add_all([DBSQLAPackSize(pack_size=size) for size in new_sizes])
                session.commit()
            except Exception:
                session.rollback()
                logger.error("!! CATALOG ERROR: Failed to persist pack sizes %s.", list(new_sizes))
                raise
            finally:
                session.close()

            version = self._catalog[0] + 1
            self._catalog = (version, new_sizes)

        logger.info("-> CATALOG UPDATED: version %d, pack sizes %s.", version, list(new_sizes))
        return new_sizes

    # ====================================================================
    # OPTIMIZATION & SQL Auditor
    # ====================================================================

    def _log_optimization(self, order_quantity, pack_sizes, version, status,
                          result: PackingResult | None = None, message=None):
        """Helper to create a new OptimizationLog record (Auditor)."""
        session = self.DBSession()
        try:
            log_entry = OptimizationLog(
                order_quantity=order_quantity if type(order_quantity) is int else None,
                total_items=result.total_items if result else None,
                total_packs=result.total_packs if result else None,
                waste=result.waste if result else None,
                pack_sizes=','.join(str(size) for size in pack_sizes),
                catalog_version=version,
                status=status,
                message=message,
            )
            session.add(log_entry)
            session.commit()
        except Exception as e:
            # A failed audit write must not fail the optimization itself
            session.rollback()
            logger.error("!! AUDITOR ERROR: Failed to log optimization: %s", e)
        finally:
            session.close()

    def optimize(self, order_quantity: int) -> PackingResult:
        """
        Solves an order against the current catalog snapshot and records the
        outcome. Optimizer errors are logged and re-raised to the caller.
        """
        version, pack_sizes = self._catalog

        try:
            result = solve(order_quantity, pack_sizes)
        except PackOptimizerError as e:
            status = _ERROR_STATUS.get(type(e), 'FAILED')
            logger.warning("!! FAILURE: Order %r rejected (%s): %s", order_quantity, status, e)
            self._log_optimization(order_quantity, pack_sizes, version, status, message=str(e))
            raise

        logger.info("-> OPTIMIZED: Order %d -> %d items in %d packs (waste %d).",
                    result.order_quantity, result.total_items, result.total_packs, result.waste)
        self._log_optimization(order_quantity, pack_sizes, version, 'OPTIMIZED', result=result)
        return result

    def recent_optimizations(self, limit: int = 20) -> list[OptimizationLog]:
        """Helper to retrieve the newest audit records, newest first."""
        session = self.DBSession()
        try:
            return (
                session.query(OptimizationLog)
                .order_by(OptimizationLog.id.desc())
                .limit(limit)
                .all()
            )
        finally:
            session.close()
