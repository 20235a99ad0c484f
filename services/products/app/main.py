"""
    Products Service API

    This module implements a FastAPI-based microservice serving the LaRama
    storefront's product catalog over GraphQL, with relational database
    persistence.

    The service exposes:
    - GraphQL endpoint at /graphql: catalog queries (public) and product
      mutations (guarded by the admin key header)
    - Health endpoint: Provides service health status for monitoring and orchestration
"""
import logging
from typing import Optional
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from strawberry.fastapi import GraphQLRouter

from . import config
from .auth import AdminKeyGuard
from .database import get_db, init_db
from .graphql_schema import schema

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(admin_key: Optional[str] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        admin_key: Secret required on mutations. Defaults to ``config.ADMIN_KEY``.

    Returns:
        Configured FastAPI instance with tables created
    """
    if admin_key is None:
        admin_key = config.ADMIN_KEY
    if not admin_key:
        logger.warning("ADMIN_KEY is empty; every product mutation will be rejected")

    # Create database tables
    init_db()

    guard = AdminKeyGuard(admin_key, header_name=config.ADMIN_KEY_HEADER)

    async def get_context(db: Session = Depends(get_db)):
        return {"db": db, "admin_guard": guard}

    app = FastAPI(title="products-service")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(GraphQLRouter(schema, context_getter=get_context), prefix="/graphql")

    @app.get("/healthz", response_model=dict)
    def health():
        """
        Health check endpoint for the products service.

        Returns:
            dict: {"status": "healthy"} when the service is operational.
        """
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
