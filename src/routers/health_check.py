from fastapi import APIRouter
from src.database.mongo import async_mongo_manager

router = APIRouter()


@router.get("/health")
def health_check():
    """Liveness check endpoint.

    Returns:
        dict: Service status and whether a database handle is bound.
    """
    connected = async_mongo_manager.database is not None
    return {
        "status": "healthy",
        "database": "connected" if connected else "disconnected",
    }
