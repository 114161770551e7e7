"""C3 Page Routes."""
from sisyflow.c3_page_routes.page_routes import create_page_router
__all__ = ["create_page_router"]
