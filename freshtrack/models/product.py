from sqlalchemy import BigInteger, Boolean, Column, Index, Integer, String
import uuid

from freshtrack.core.database import Base
from freshtrack.utils.date_helpers import current_millis


class ProductEntity(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    barcode = Column(String, index=True)
    # Référence souple vers categories.name, sans clé étrangère
    category = Column(String, nullable=False, index=True)

    # Timestamps en millisecondes depuis l'epoch
    expiry_date = Column(BigInteger, nullable=False)
    added_date = Column(BigInteger, nullable=False, default=current_millis)

    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(String)
    image_uri = Column(String)

    notification_enabled = Column(Boolean, nullable=False, default=True)
    is_consumed = Column(Boolean, nullable=False, default=False)
    is_discarded = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_products_active_expiry", "is_consumed", "is_discarded", "expiry_date"),
    )

    def __repr__(self):
        return f"<ProductEntity(id={self.id}, name={self.name}, category={self.category})>"
