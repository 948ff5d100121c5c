"""FastAPI binding for the request pipeline."""
