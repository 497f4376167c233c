"""
member_service tests

Covers the backend logic of the member account service:

- FastAPI application and routes (`main.py`, `routes/`)
- SQLAlchemy model and database handle (`models.py`, `db.py`)
- Password hashing, token issuing and the access guard (`auth.py`, `tokens.py`)
- Account operations (`accounts.py`)
"""
