"""Pydantic schemas shared by the REST API and the session client."""
