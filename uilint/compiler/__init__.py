"""Loaders that turn files into structural models and configuration."""
