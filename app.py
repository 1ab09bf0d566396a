"""
Almacen ERP API - Main Application

Multi-tenant warehouse ERP backend:
- /api/v1/companies/...          → Company management (with billing status)
- /api/v1/payments/...           → Payment ledger
- /api/v1/{company_id}/...       → Company-scoped API (billing gated)
- /api/v1/tenant/{id}/info       → Public company info (for login page)
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Path, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.orm import Session

from database import init_db, db, get_db
from database.seed import seed_base_company
from database.models import Company
from core.billing import InvalidPaymentDateError
from core.config import settings
from core.dependencies import PAYMENT_REQUIRED_MESSAGE
from schemas.company import CompanyPublicInfo
from services.company import CompanyService

from routers import companies_router, payments_router, access_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("🚀 Starting Almacen ERP API...")

    try:
        init_db()
        logger.info("✅ Database initialized")

        # Base company (first run only)
        with db.get_session() as session:
            seed_base_company(session)
        logger.info("✅ Base company seeded")

    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}")
        raise

    logger.info("✅ Almacen ERP API started successfully!")

    yield

    logger.info("👋 Shutting down Almacen ERP API...")


# Create FastAPI application
app = FastAPI(
    title="Almacen ERP API",
    description="""
    Multi-tenant ERP para gestión de depósitos.

    * **Companies** - Empresas y su estado de facturación
    * **Payments** - Registro de pagos por empresa
    * **Access** - Verificación de acceso según estado de pago
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Malformed stored payment dates are reported, never coerced
@app.exception_handler(InvalidPaymentDateError)
async def invalid_payment_date_handler(request: Request, exc: InvalidPaymentDateError):
    logger.warning(f"Invalid payment date on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Fecha de pago inválida", "detail": str(exc)}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "detail": str(exc) if settings.debug else None
        }
    )


# ==================== HEALTH & PUBLIC ENDPOINTS ====================

@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "Almacen ERP API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health", tags=["Health"])
async def health_check(db_session: Session = Depends(get_db)):
    from sqlalchemy import text
    try:
        db_session.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "disconnected", "error": str(e)}
        )


@app.get(
    "/api/v1/tenant/{company_id}/info",
    response_model=CompanyPublicInfo,
    tags=["Public"]
)
async def get_company_public_info(
    company_id: int = Path(..., ge=1, description="ID de empresa"),
    db_session: Session = Depends(get_db)
):
    """
    Get public company info for login page.
    Only returns names and payment state - no sensitive data.
    """
    company = db_session.query(Company).filter(
        Company.id == company_id,
        Company.is_active == True
    ).first()

    if not company:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Empresa no encontrada"
        )

    billing = CompanyService(db_session).billing_status(company)

    return CompanyPublicInfo(
        id=company.id,
        legal_name=company.legal_name,
        trade_name=company.trade_name,
        payment_required=billing.is_blocked,
        payment_message=PAYMENT_REQUIRED_MESSAGE if billing.is_blocked else None
    )


# ==================== ADMIN ROUTES ====================

app.include_router(
    companies_router,
    prefix="/api/v1/companies",
    tags=["Companies"]
)
app.include_router(
    payments_router,
    prefix="/api/v1/payments",
    tags=["Payments"]
)


# ==================== COMPANY-SCOPED ROUTES ====================
# require_billing_current resolves {company_id} and enforces billing status

COMPANY_PREFIX = "/api/v1/{company_id}"

app.include_router(access_router, prefix=COMPANY_PREFIX, tags=["Access"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
