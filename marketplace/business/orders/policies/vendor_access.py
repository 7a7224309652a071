"""
Vendor Access Policy

Only owners and members of a vendor may see or manage its orders.
"""

from sqlalchemy import or_
from marketplace import db
from marketplace.data.core.user import User
from marketplace.data.core.vendor import Vendor
from marketplace.business.orders.errors import VendorAccessDenied, VendorNotFound


class VendorAccessPolicy:
    """Membership check run against the caller's current transaction"""

    @classmethod
    def check(cls, user_id: str, vendor_id: str) -> Vendor:
        """
        Return the vendor if the user is one of its owners or members.

        Called inside the unit of work that performs the mutation, so a
        membership revoked concurrently cannot authorize a later write.

        Raises:
            VendorNotFound: If the vendor does not exist
            VendorAccessDenied: If the user is neither owner nor member
        """
        vendor = (
            Vendor.query
            .filter(
                Vendor.id == vendor_id,
                or_(
                    Vendor.owners.any(User.id == user_id),
                    Vendor.members.any(User.id == user_id),
                ),
            )
            .first()
        )
        if vendor is not None:
            return vendor

        if db.session.get(Vendor, vendor_id) is None:
            raise VendorNotFound("Vendor not found")
        raise VendorAccessDenied("You don't have access to this vendor")
