from sqlalchemy import Column, Integer, String, Numeric, Text, CheckConstraint
from app.database import Base


class Product(Base):
    """Local catalog row. ``name`` is the join key against the ERP; ``id`` is local only."""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True, default="")
    price = Column(Numeric(10, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
