# API routers package

from weather_monitor.routers.auth import router as auth_router
from weather_monitor.routers.weather import router as weather_router
from weather_monitor.routers.admin import router as admin_router

# Re-export for easy importing
auth = auth_router
weather = weather_router
admin = admin_router
