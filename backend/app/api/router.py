"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import trips, schedule, expenses, budget

api_router = APIRouter()

# Include all route modules
api_router.include_router(trips.router)
api_router.include_router(schedule.router)
api_router.include_router(expenses.router)
api_router.include_router(budget.router)
