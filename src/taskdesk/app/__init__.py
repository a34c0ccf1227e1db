"""Application package for the TaskDesk FastAPI service."""
