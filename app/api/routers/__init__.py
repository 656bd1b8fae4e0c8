"""
app/api/routers package marker.
"""

from app.api.routers.calculate import router as calculate_router
from app.api.routers.csv_import import router as csv_import_router
from app.api.routers.export import router as export_router

__all__ = [
    "calculate_router",
    "csv_import_router",
    "export_router",
]
