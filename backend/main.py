from fastapi import FastAPI
from dotenv import load_dotenv

load_dotenv()
from fastapi.middleware.cors import CORSMiddleware
from database import Base, SessionLocal, engine
from datetime import datetime
import os
import logging
from fastapi.openapi.utils import get_openapi

import models  # noqa: F401  registers every table on Base.metadata
import auth
import routers.app_config as app_config
import routers.audit_logs as audit_logs
import routers.batch as batch
import routers.categories as categories
import routers.dashboard as dashboard
import routers.invoices as invoices
import routers.medicine as medicine
import routers.purchase_orders as purchase_orders
import routers.reports as reports
import routers.stock_adjustments as stock_adjustments
import routers.suppliers as suppliers
import routers.users as users
from crud.app_config import ensure_default_configs


LOG_DIR = os.getenv("LOG_DIR", "logs")
os.makedirs(LOG_DIR, exist_ok=True) # Create 'logs' directory if it doesn't exist

# Create a unique log file name based on current date/time
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

# Configure the root logger
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE, # Log to a file
    filemode='a' # Append to the file if it exists
)

# Also log to the console
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler) # Add to the root logger

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)


app = FastAPI()


allowed_origins_str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173"
)

# Split the string into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',')]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Pharmacy POS API",
        version="1.0.0",
        description="API for pharmacy billing, batch inventory and purchasing",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    # Apply security globally to all endpoints
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


@app.on_event("startup")
def on_startup():
    db = SessionLocal()
    try:
        ensure_default_configs(db)
    finally:
        db.close()

    if os.getenv("ENABLE_SCHEDULER", "true").lower() != "false":
        from scheduler import scheduler
        scheduler.start()
        logger.info("Stock alert scheduler started.")


@app.on_event("shutdown")
def on_shutdown():
    if os.getenv("ENABLE_SCHEDULER", "true").lower() != "false":
        from scheduler import scheduler
        if scheduler.running:
            scheduler.shutdown(wait=False)


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(suppliers.router)
app.include_router(categories.router)
app.include_router(medicine.router)
app.include_router(batch.router)
app.include_router(invoices.router)
app.include_router(purchase_orders.router)
app.include_router(stock_adjustments.router)
app.include_router(audit_logs.router)
app.include_router(dashboard.router)
app.include_router(app_config.router)
app.include_router(reports.router)

@app.get("/")
async def test_route():
    return {"message": "Welcome to the Pharmacy POS API!"}
