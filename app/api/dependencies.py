"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from app.services.domain.row_layout_generator import RowLayoutGenerator
from app.services.application.layout_service import LayoutService


def get_row_layout_generator() -> RowLayoutGenerator:
    """
    Dependency factory for RowLayoutGenerator.

    Returns:
        RowLayoutGenerator configured from settings
    """
    return RowLayoutGenerator()


def get_layout_service(
    row_generator: Annotated[RowLayoutGenerator, Depends(get_row_layout_generator)],
) -> LayoutService:
    """
    Dependency factory for LayoutService.

    Args:
        row_generator: Row layout generator (injected)

    Returns:
        LayoutService instance
    """
    return LayoutService(row_generator=row_generator)


# Type aliases for cleaner route signatures
LayoutServiceDep = Annotated[LayoutService, Depends(get_layout_service)]
