from contextlib import contextmanager
from marketplace import db
from marketplace.logger import get_logger
from marketplace.utils.logging_sanitizer import sanitize_exception_message

logger = get_logger("marketplace.data.unit_of_work")


@contextmanager
def unit_of_work():
    """
    Run the enclosed block as one database transaction.

    Commits when the block finishes, rolls back and re-raises on any
    exception, so callers never observe a partially applied change.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.debug(f"Unit of work rolled back: {type(e).__name__}: {sanitize_exception_message(e)}")
        raise
