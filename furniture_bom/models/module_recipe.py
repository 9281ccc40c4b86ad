# furniture_bom/models/module_recipe.py
from sqlalchemy import String, Integer, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from furniture_bom.db.base import Base


class ModuleRecipe(Base):
    """
    One (component, quantity) requirement of a module.

    item_id is not a foreign key: a line may reference a component missing
    from the catalog, such lines are skipped when the BOM is computed.
    """

    __tablename__ = "module_recipes"

    id :Mapped[str] = mapped_column(String(36), primary_key=True, comment="Recipe line UUID")

    module_id :Mapped[str] = mapped_column(
        String(36),
        ForeignKey("modules.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning module ID",
    )

    item_id :Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        comment="Referenced component ID",
    )

    quantity :Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Count of the component per one module",
    )

    # 保持录入顺序，recipe index 按此顺序展开
    position :Mapped[int] = mapped_column(Integer, nullable=False, default=0, comment="Line order")

    module :Mapped["CabinetModule"] = relationship("CabinetModule", back_populates="recipes")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_recipe_quantity_positive"),
        Index("idx_recipe_module", "module_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ModuleRecipe module={self.module_id} "
            f"item={self.item_id} qty={self.quantity}>"
        )
