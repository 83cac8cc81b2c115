from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.models.product import Product
from app.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    def __init__(self, db: Session):
        super().__init__(Product, db)

    def get_by_name(self, name: str) -> Optional[Product]:
        return self.db.query(Product).filter(Product.name == name).first()

    def delete_not_in_names(self, names: Iterable[str]) -> int:
        """Delete every product whose name is not listed. Does not commit."""
        names = list(set(names))
        if not names:
            return self.delete_all()
        return (
            self.db.query(Product)
            .filter(Product.name.notin_(names))
            .delete(synchronize_session=False)
        )

    def delete_all(self) -> int:
        """Does not commit."""
        return self.db.query(Product).delete(synchronize_session=False)
