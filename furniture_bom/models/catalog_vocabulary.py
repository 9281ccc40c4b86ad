# furniture_bom/models/catalog_vocabulary.py
from datetime import datetime
from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from furniture_bom.db.base import Base


class CatalogModel(Base):
    """Model / series vocabulary offered in the global appearance settings."""

    __tablename__ = "catalog_models"

    id :Mapped[str] = mapped_column(String(36), primary_key=True)
    name :Mapped[str] = mapped_column(String(100), nullable=False, unique=True, comment="Model name, e.g. Tokyo")
    created_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class CatalogFinish(Base):
    """Finish / colour vocabulary offered in the global appearance settings."""

    __tablename__ = "catalog_finishes"

    id :Mapped[str] = mapped_column(String(36), primary_key=True)
    name :Mapped[str] = mapped_column(String(100), nullable=False, unique=True, comment="Finish name, e.g. Rojo Mate")
    created_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
