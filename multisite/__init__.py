"""multisite: virtual sites for a small CMS, and declarative CRUD controllers."""

__version__ = "0.3.0"
