"""
InventoryGuard - the only code path that mutates Listing.available_qty

Stock is reserved with a single conditional UPDATE (compare-and-decrement)
so concurrent buyers can never both consume the last units. No method here
commits; callers run the guard inside their own unit of work.
"""

from dataclasses import dataclass
from decimal import Decimal
from sqlalchemy import select, update
from marketplace import db
from marketplace.data.catalog.listing import Listing
from marketplace.business.orders.errors import (
    ListingNotFound,
    ListingUnavailable,
    MissingPrice,
    InsufficientStock,
)
from marketplace.logger import get_logger

logger = get_logger("marketplace.domain.orders.inventory_guard")


@dataclass(frozen=True)
class StockReservation:
    """What an order needs to know about the listing it was placed on"""
    listing_id: str
    quantity: int
    unit_price: Decimal
    stock_tracked: bool


class InventoryGuard:
    """Reserve and release units of managed STOCK listings"""

    @staticmethod
    def load_orderable_listing(listing_id: str) -> Listing:
        """
        Load a listing and check it can be ordered.

        Checks run in a fixed order: existence, availability, price.

        Raises:
            ListingNotFound, ListingUnavailable, MissingPrice
        """
        listing = db.session.get(Listing, listing_id)
        if listing is None:
            raise ListingNotFound("Listing not found")
        if not listing.is_available:
            raise ListingUnavailable("Listing is not available for order")
        if not listing.price:
            raise MissingPrice("Listing does not have a price set")
        return listing

    @classmethod
    def reserve_stock(cls, listing_id: str, quantity: int) -> StockReservation:
        """
        Reserve ``quantity`` units of a listing.

        Untracked listings are treated as unlimited and left untouched.
        For tracked listings the decrement only happens if enough units
        remain, evaluated by the database in the same statement.

        Raises:
            ListingNotFound, ListingUnavailable, MissingPrice, InsufficientStock
        """
        listing = cls.load_orderable_listing(listing_id)
        reservation = StockReservation(
            listing_id=listing.id,
            quantity=quantity,
            unit_price=listing.price,
            stock_tracked=listing.tracks_stock,
        )

        if not reservation.stock_tracked:
            return reservation

        result = db.session.execute(
            update(Listing)
            .where(Listing.id == listing_id, Listing.available_qty >= quantity)
            .values(available_qty=Listing.available_qty - quantity)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            # Best effort: the value may already be stale when reported
            last_known = db.session.scalar(select(Listing.available_qty).where(Listing.id == listing_id))
            logger.info(f"Stock reservation rejected for listing {listing_id}: requested {quantity}, available {last_known}")
            raise InsufficientStock(
                f"Only {last_known} items available",
                available_qty=last_known,
                requested=quantity,
            )

        db.session.expire(listing, ['available_qty'])
        logger.debug(f"Reserved {quantity} unit(s) of listing {listing_id}")
        return reservation

    @staticmethod
    def release_stock(listing_id: str, quantity: int) -> None:
        """
        Return ``quantity`` units to a listing's stock.

        Only called for orders that reserved stock when they were created.
        The increment is unconditional; listings whose quantity has since
        been cleared (unlimited) are left untouched.
        """
        db.session.execute(
            update(Listing)
            .where(Listing.id == listing_id, Listing.available_qty.isnot(None))
            .values(available_qty=Listing.available_qty + quantity)
            .execution_options(synchronize_session=False)
        )

        for cached in list(db.session.identity_map.values()):
            if isinstance(cached, Listing) and cached.id == listing_id:
                db.session.expire(cached, ['available_qty'])
        logger.debug(f"Released {quantity} unit(s) of listing {listing_id}")
