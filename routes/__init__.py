"""
API routers, one per resource. server.py mounts all of them under the
configured API prefix.
"""

from routes.comments import router as comments_router
from routes.playlists import router as playlists_router
from routes.social import dashboard_router, likes_router, tweets_router
from routes.subscriptions import router as subscriptions_router
from routes.users import router as users_router
from routes.videos import router as videos_router

ROUTERS = [
    users_router,
    videos_router,
    comments_router,
    playlists_router,
    subscriptions_router,
    likes_router,
    tweets_router,
    dashboard_router,
]

__all__ = ["ROUTERS"]
