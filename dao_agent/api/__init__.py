"""Request boundary: framework-agnostic service plus the FastAPI app."""
