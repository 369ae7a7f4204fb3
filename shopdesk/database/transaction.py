from contextlib import contextmanager

from sqlalchemy.orm import Session


@contextmanager
def atomic(db: Session):
    """Commit everything written inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except BaseException:
        db.rollback()
        raise
