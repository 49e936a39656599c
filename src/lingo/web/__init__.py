"""Web API (FastAPI) exposing the read queries."""
