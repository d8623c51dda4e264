"""Configuration for jsontable."""
