"""Project documentation model."""

from sisyflow.c1_documentation_models.documentation import ProjectDocumentation, PROJECT_DOCUMENTATION_ID

__all__ = ["ProjectDocumentation", "PROJECT_DOCUMENTATION_ID"]
