"""Generic base repository with reusable CRUD operations."""

from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from finstatements.database import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Thin data-access layer over SQLAlchemy.

    Subclasses add domain-specific queries. Repositories only touch the
    session (add/delete/flush); the caller decides when to commit, so the
    ingestion service can commit every write on its own.
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model

    # ── reads ────────────────────────────────────────────────────────

    def get(self, id: int) -> Optional[T]:
        return self.db.get(self.model, id)

    def exists(self, id: int) -> bool:
        return (
            self.db.query(self.model.id).filter(self.model.id == id).first() is not None
        )

    def get_all(self, *, skip: int = 0, limit: int = 100) -> List[T]:
        return (
            self.db.query(self.model)
            .order_by(self.model.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        return self.db.query(self.model).count()

    # ── writes ───────────────────────────────────────────────────────

    def create(self, obj: T) -> T:
        """Add object to session and assign its id (caller must commit)."""
        self.db.add(obj)
        self.db.flush()
        return obj

    def update(self, obj: T) -> T:
        """Flush pending attribute changes to validate constraints (caller must commit)."""
        self.db.flush()
        return obj

    def delete(self, id: int) -> bool:
        """Mark object for deletion (caller must commit)."""
        obj = self.get(id)
        if obj is None:
            return False
        self.db.delete(obj)
        self.db.flush()
        return True
