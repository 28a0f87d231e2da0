# backend/main.py
import logging

from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from database import SessionLocal, init_db
from populate_db import seed_admin
from utils.errors import register_error_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Import routers
from routes.auth import router as auth_router
from routes.products import router as products_router
from routes.site_reviews import router as site_reviews_router
from routes.users import router as users_router
from routes.cart import router as cart_router
from routes.payment import router as payment_router
from routes.orders import router as orders_router
from routes.support import router as support_router
from routes.logs import router as logs_router

# Initialization: schema and the administrator account
init_db()
with SessionLocal() as _db:
    seed_admin(_db)

app = FastAPI(title="Hardware Storefront API", version="1.0.0")

# CORS: the SPA origin from settings plus local development servers
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Register routers under /api
api = APIRouter(prefix="/api")
api.include_router(auth_router)
api.include_router(products_router)
api.include_router(site_reviews_router)
api.include_router(cart_router)
api.include_router(users_router)
api.include_router(payment_router)
api.include_router(orders_router)
api.include_router(support_router)
api.include_router(logs_router)
app.include_router(api)

@app.get("/")
def read_root():
    return {"message": "Hardware Storefront API is running"}
