"""
auth — User authentication module.

Provides:
  • JWT issue & verification (``TokenService``)
  • Password hashing (bcrypt)
  • Check-user / Register / Login API routes
  • ``get_current_user`` FastAPI dependency
"""
