"""Central API router aggregating all domain routers."""

from fastapi import APIRouter

from topichub.auth.router import router as auth_router
from topichub.health.router import router as health_router
from topichub.subscription.router import router as subscription_router
from topichub.topic.router import router as topic_router
from topichub.user.router import router as user_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(topic_router)
api_router.include_router(subscription_router)
