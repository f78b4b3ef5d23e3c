"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import admin, auth, bookings, favorites, packages, reviews

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Packages
api_router.include_router(packages.router, prefix="/packages", tags=["Packages"])

# Favorites
api_router.include_router(favorites.router, prefix="/favorites", tags=["Favorites"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Reviews
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
