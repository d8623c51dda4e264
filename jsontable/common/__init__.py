"""Logging and metrics shared across jsontable."""
