from sqlalchemy import Column, Integer, String, DateTime, func
from app.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    # Stored and compared verbatim (known deficiency, hashing is out of scope)
    password = Column(String(255), nullable=False)
    address = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
