# furniture_bom/models/cabinet_module.py
from datetime import datetime
from typing import List
from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from furniture_bom.db.base import Base


class CabinetModule(Base):
    """
    Sellable assembly. Its BOM is the set of ModuleRecipe rows pointing at it.
    """

    __tablename__ = "modules"

    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="Module UUID")

    name :Mapped[str] = mapped_column(String(255), nullable=False, comment="Module name")

    category :Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Grouping tag: Bajos / Altos / Columnas / Imported",
    )

    created_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Creation timestamp"
    )

    recipes :Mapped[List["ModuleRecipe"]] = relationship(
        "ModuleRecipe",
        back_populates="module",
        cascade="all, delete-orphan",
        order_by="ModuleRecipe.position",
    )

    def __repr__(self) -> str:
        return f"<CabinetModule id={self.id} name={self.name}>"
