from marketplace import db
from marketplace.data.base import TimestampedBase

vendor_owners = db.Table(
    'vendor_owners',
    db.Column('vendor_id', db.String(36), db.ForeignKey('vendors.id'), primary_key=True),
    db.Column('user_id', db.String(36), db.ForeignKey('users.id'), primary_key=True),
)

vendor_members = db.Table(
    'vendor_members',
    db.Column('vendor_id', db.String(36), db.ForeignKey('vendors.id'), primary_key=True),
    db.Column('user_id', db.String(36), db.ForeignKey('users.id'), primary_key=True),
)


class Vendor(TimestampedBase):
    """
    A seller on the marketplace.

    Only used by the order subsystem for access control: owners and members
    may read and manage orders placed on the vendor's listings.
    """
    __tablename__ = 'vendors'

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    contact_email = db.Column(db.String(255), nullable=True)
    contact_phone = db.Column(db.String(50), nullable=True)

    # Relationships
    owners = db.relationship('User', secondary=vendor_owners, lazy='selectin')
    members = db.relationship('User', secondary=vendor_members, lazy='selectin')
    listings = db.relationship('Listing', back_populates='vendor', lazy='dynamic')

    @property
    def staff_emails(self):
        """Unique owner and member e-mail addresses, owners first"""
        emails = []
        for user in list(self.owners) + list(self.members):
            if user.email and user.email not in emails:
                emails.append(user.email)
        return emails

    def to_summary_dict(self):
        return {
            'id': self.id,
            'name': self.name,
        }

    def __repr__(self):
        return f'<Vendor {self.name}>'
