import logging
import os
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Import routes
from routes import users, menu_management, carts, order_management, stats, recaps, notifications

# Import database and models
import models  # noqa: F401  registers every table on Base
from utils.database import engine, Base
from utils.storage import MEDIA_ROOT, MEDIA_BASE_URL
from services.cart import CartStore

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title="Ayam Geprek Ordering API",
    description="Customer ordering and back-office management for an Ayam Geprek restaurant",
    version="1.0.0",
    openapi_tags=[
        {"name": "users", "description": "Staff sign-up and login"},
        {"name": "menu", "description": "Menu catalog"},
        {"name": "carts", "description": "Customer carts and checkout"},
        {"name": "orders", "description": "Order management"},
        {"name": "stats", "description": "Dashboard statistics"},
        {"name": "recaps", "description": "Sales recap requests, approval and export"},
    ],
    swagger_ui_parameters={
        "persistAuthorization": True,
        "defaultModelsExpandDepth": -1
    }
)

app.state.cart_store = CartStore(idle_seconds=int(os.getenv("CART_IDLE_SECONDS", 2 * 60 * 60)))

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Path(MEDIA_ROOT).mkdir(parents=True, exist_ok=True)
app.mount(MEDIA_BASE_URL, StaticFiles(directory=MEDIA_ROOT), name="media")

# Include routers
app.include_router(users.router)
app.include_router(menu_management.router)
app.include_router(carts.router)
app.include_router(order_management.router)
app.include_router(stats.router)
app.include_router(recaps.router)
app.include_router(notifications.router)

# Root endpoint
@app.get("/")
async def root():
    return {"message": "Welcome to Ayam Geprek Ordering API"}

# Main run block
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
