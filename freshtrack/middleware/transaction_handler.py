from functools import wraps
from sqlalchemy.exc import SQLAlchemyError
import logging

from freshtrack.utils.exceptions import StorageError

logger = logging.getLogger(__name__)


def transactional(*tables: str):
    """
    Décorateur pour gérer automatiquement les transactions
    Usage: @transactional("products") sur les méthodes d'écriture d'un DAO

    La méthode décorée reçoit une session ouverte et s'exécute sur le worker
    de la base. Commit puis invalidation des tables en cas de succès ;
    rollback et StorageError en cas d'échec.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            database = self.database

            def work():
                with database.session() as session:
                    try:
                        result = func(self, session, *args, **kwargs)
                        session.commit()
                    except SQLAlchemyError as e:
                        session.rollback()
                        logger.error(
                            f"Transaction failed in {func.__name__}: {e}", exc_info=True
                        )
                        raise StorageError(f"{func.__name__} failed: {e}") from e

                logger.debug(f"Transaction committed in {func.__name__}")
                database.invalidation_tracker.notify(tables)
                return result

            return await database.run_in_worker(work)

        return wrapper

    return decorator
