from marketplace import db
from marketplace.data.base import TimestampedBase
from marketplace.business.orders.state_machine import OrderStateMachine


class Order(TimestampedBase):
    """
    One purchased unit of a listing.

    Multi-unit purchases fan out into several rows of quantity 1.
    ``total_price`` is the listing price frozen at creation time and
    ``stock_tracked`` records whether a unit was reserved from the
    listing's stock, so cancellation knows whether to give it back.
    """
    __tablename__ = 'orders'

    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    listing_id = db.Column(db.String(36), db.ForeignKey('listings.id'), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=OrderStateMachine.PENDING, index=True)
    notes = db.Column(db.Text, nullable=True)
    transaction_id = db.Column(db.String(255), nullable=True)
    stock_tracked = db.Column(db.Boolean, nullable=False, default=False)

    __table_args__ = (
        db.CheckConstraint('quantity = 1', name='ck_order_unit_quantity'),
    )

    # Relationships
    user = db.relationship('User')
    listing = db.relationship('Listing')

    def to_api_dict(self, include_listing=False, include_user=False):
        """Convert to the camelCase shape returned by the API"""
        result = {
            'id': self.id,
            'userId': self.user_id,
            'listingId': self.listing_id,
            'quantity': self.quantity,
            'totalPrice': str(self.total_price) if self.total_price is not None else None,
            'status': self.status,
            'notes': self.notes,
            'transactionId': self.transaction_id,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_listing:
            result['listing'] = self.listing.to_summary_dict() if self.listing else None
        if include_user:
            result['user'] = self.user.to_public_dict() if self.user else None
        return result

    def __repr__(self):
        return f'<Order {self.id} {self.status}>'
