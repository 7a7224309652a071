"""
Order business layer.

Main entry points:
- OrderFactory: creates unit orders together with the stock reservation
- OrderContext: domain facade for buyer/vendor updates and admin purge
- OrderStatusManager: guarded status transitions and stock release
- InventoryGuard: the only writer of Listing.available_qty
- State machines: vendor and buyer transition tables
- Policies: vendor access
- OrderNarrator: notification and log wording
"""
