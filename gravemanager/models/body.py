import enum
from datetime import date
from sqlalchemy import String, Boolean, Date, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from gravemanager.database import Base


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class Body(Base):
    __tablename__ = "bodies"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    gender: Mapped[Gender | None] = mapped_column(
        SAEnum(Gender, values_callable=lambda e: [x.value for x in e]),
        nullable=True,
    )
    born: Mapped[date | None] = mapped_column(Date, nullable=True)
    died: Mapped[date | None] = mapped_column(Date, nullable=True)
    vampire: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # Written only by CemeteryService
    grave_id: Mapped[int | None] = mapped_column(ForeignKey("graves.id"), nullable=True, index=True)

    grave: Mapped["Grave | None"] = relationship(back_populates="bodies")

    def __repr__(self) -> str:
        return f"Body(id={self.id})"
