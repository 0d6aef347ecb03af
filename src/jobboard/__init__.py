"""Job board service: public listing, application submission and admin CRUD."""

__version__ = "0.1.0"
