"""C3 Documentation Routes."""
from sisyflow.c3_documentation_routes.documentation_routes import create_documentation_router
__all__ = ["create_documentation_router"]
