# furniture_bom/models/component_item.py
from typing import Optional
from decimal import Decimal
from datetime import datetime
from sqlalchemy import String, Numeric, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
from furniture_bom.db.base import Base
from furniture_bom.db.enums import Hand


class ComponentItem(Base):
    """
    Physical catalog component (door, hinge, panel ...).

    Invariants:
    - Immutable identity
    - unit_price is non-negative
    - (category, width, height, depth, hand) is the substitution key;
      variants differ only by model / finish
    """

    __tablename__ = "items"

    # =========
    # 🔒 Identity
    # =========
    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="Component UUID")

    sku :Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
        comment="Human-facing code, display / sort key (not unique across finishes)",
    )

    name :Mapped[str] = mapped_column(String(255), nullable=False, comment="Component name")

    category :Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Free-form classification, e.g. door / hinge",
    )

    brand :Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="Brand / supplier")

    # =========
    # 💰 Pricing
    # =========
    price :Mapped[Decimal] = mapped_column(
        Numeric(12, 5),
        nullable=False,
        comment="Unit price",
    )

    # =========
    # 📐 Dimensions
    # =========
    width :Mapped[Optional[float]] = mapped_column(nullable=True, comment="Width")
    height :Mapped[Optional[float]] = mapped_column(nullable=True, comment="Height")
    depth :Mapped[Optional[float]] = mapped_column(nullable=True, comment="Depth")

    # =========
    # 🎨 Aesthetic vocabulary (substitution)
    # =========
    model :Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="Model / series")
    finish :Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="Finish / colour")
    hand :Mapped[Optional[Hand]] = mapped_column(
        Enum(Hand, name="hand_enum"),
        nullable=True,
        comment="Orientation of mirrored parts",
    )

    created_at :Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="Creation timestamp"
    )

    def __repr__(self) -> str:
        return f"<ComponentItem id={self.id} sku={self.sku} price={self.price}>"
