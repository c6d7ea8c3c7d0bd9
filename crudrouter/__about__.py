__version__ = "1.0.0"
__description__ = "crudrouter : convention based CRUD routes for Flask and SQLAlchemy"
