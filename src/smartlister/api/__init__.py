"""Smart Lister — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request/response
models, and the prompt compilation logic.

Modules
-------
main
    FastAPI application with all route handlers, the access gate, and the
    ``main()`` CLI entry point.
models
    Pydantic models for API request and response validation.
prompt_builder
    System instruction, user prompt compilation and image decoding.
"""
