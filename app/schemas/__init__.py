"""
Schemas module - Request/Response schemas for API endpoints.

Everything lives in app.schemas.schemas:
- Request schemas (what API accepts)
- Response schemas (what API returns, always with message/success)
"""
