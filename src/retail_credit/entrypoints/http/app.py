from fastapi import FastAPI

from retail_credit.entrypoints.http.exception_handlers import register_exception_handlers
from retail_credit.entrypoints.http.routes.clients import router as clients_router
from retail_credit.entrypoints.http.routes.credits import router as credits_router
from retail_credit.entrypoints.http.routes.health import router as health_router
from retail_credit.infra.logging_config import configure_logging


def build_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Retail Credit API",
        description="""
        Installment credit engine for retail credit sales.

        ## Features
        - Quote a credit sale (down payment, interest, schedule)
        - Open, pay and cancel credits
        - Overdue and pending installments per client
        - Delinquent credits report

        ## Monetary Values
        All monetary values are decimal strings (e.g., "61250.00").

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(credits_router, prefix="/v1")
    app.include_router(clients_router, prefix="/v1")

    return app


app = build_app()
