"""C2 Documentation Service - Shared project documentation."""
from sisyflow.c2_documentation_service.documentation_service import DocumentationService
__all__ = ["DocumentationService"]
