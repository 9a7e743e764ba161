"""
salesauth package

Credential issuance for the sales desk backend. It includes:

- FastAPI application factory (`auth_service/main.py`)
- SQLAlchemy user model and credential store (`models.py`, `db.py`, `store.py`)
- Password hashing and JWT issuing (`auth.py`)
- Registration / login / refresh orchestration (`service.py`)
- Pydantic schemas and settings (`schemas.py`, `config.py`)
"""
