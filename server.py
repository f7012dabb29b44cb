from src.database.mongo import async_mongo_manager
from src.database.models.user_chats import UserChats
from src.middlewares.auth import Unauthenticated, unauthenticated_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
import logging
import uvicorn
from src.config import CLIENT_URL, PORT, configure_logging
from contextlib import asynccontextmanager

from src.routers import (
    health_check_router,
    chats_router,
    upload_router,
)

configure_logging(level=logging.INFO)


def register_routers(app: FastAPI):
    # Health
    app.include_router(health_check_router, tags=["Health"])

    # Chats
    app.include_router(chats_router, tags=["Chats"])

    # Uploads
    app.include_router(upload_router, tags=["Uploads"])


def create_app(debug=False, **kwargs):
    """Create and configure the FastAPI app instance."""

    logging.info("Creating FastAPI app...")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await async_mongo_manager.connect()
        await UserChats.ensure_indexes()
        logging.info("Database connection established")
        try:
            yield
        finally:
            await async_mongo_manager.close()
            logging.info("Database connection closed")

    app = FastAPI(debug=debug, lifespan=lifespan, **kwargs)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[CLIENT_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Unauthenticated, unauthenticated_handler)

    register_routers(app)
    return app


app = create_app()


if __name__ == "__main__":
    logging.info(f"Server is running on {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
