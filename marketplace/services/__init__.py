"""
Services Layer
Read-side queries and background notification helpers used by the routes.

Services should:
- Not change order state (mutations live in marketplace.business)
- Be stateless where possible
"""
