"""imgview - FastAPI HTTP layer.

This package contains the FastAPI application, Pydantic response models and
the gallery directory listing.

Modules
-------
main
    Application factory, route handlers, request logging and the ``main()``
    CLI entry point.
models
    Pydantic models for the JSON gallery listing.
gallery
    Enumeration of displayable JPEG images in the serve directory.
"""
