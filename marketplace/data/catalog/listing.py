from marketplace import db
from marketplace.data.base import TimestampedBase


class Listing(TimestampedBase):
    """
    A product or service offered by a vendor.

    Stock is only enforced for managed STOCK listings with a known quantity;
    a null ``available_qty`` means unlimited. ``available_qty`` is changed
    exclusively through InventoryGuard.
    """
    __tablename__ = 'listings'

    INVENTORY_STOCK = 'STOCK'
    INVENTORY_ON_DEMAND = 'ON_DEMAND'
    INVENTORY_TYPES = (INVENTORY_STOCK, INVENTORY_ON_DEMAND)

    vendor_id = db.Column(db.String(36), db.ForeignKey('vendors.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    is_available = db.Column(db.Boolean, nullable=False, default=True)
    managed = db.Column(db.Boolean, nullable=False, default=False)
    inventory_type = db.Column(db.String(20), nullable=False, default=INVENTORY_ON_DEMAND)
    available_qty = db.Column(db.Integer, nullable=True)

    __table_args__ = (
        db.CheckConstraint('available_qty IS NULL OR available_qty >= 0', name='ck_listing_available_qty'),
        db.CheckConstraint("inventory_type IN ('STOCK', 'ON_DEMAND')", name='ck_listing_inventory_type'),
    )

    # Relationships
    vendor = db.relationship('Vendor', back_populates='listings')

    @property
    def tracks_stock(self):
        """True when orders must reserve units from available_qty"""
        return (
            bool(self.managed)
            and self.inventory_type == self.INVENTORY_STOCK
            and self.available_qty is not None
        )

    def to_summary_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'price': str(self.price) if self.price is not None else None,
            'vendor': self.vendor.to_summary_dict() if self.vendor else None,
        }

    def __repr__(self):
        return f'<Listing {self.name} qty={self.available_qty}>'
