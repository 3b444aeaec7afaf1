from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from gravemanager.database import Base


class Grave(Base):
    """A grave at a row/column position holding up to ``capacity`` bodies."""

    __tablename__ = "graves"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    column: Mapped[int] = mapped_column("col", Integer, nullable=False)
    row: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    bodies: Mapped[list["Body"]] = relationship(back_populates="grave", order_by="Body.id")

    def __repr__(self) -> str:
        return f"Grave(id={self.id})"
