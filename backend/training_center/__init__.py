"""Application package for the training center backend.

This package exposes the model, repository, service and API modules
used by the FastAPI application and the `training-center` entry point.
Individual modules contain the concrete implementations and
documentation.
"""
