from fastapi import APIRouter
from mascate_pro.api.v1 import activity_logs, admin, auth, categories, products, stock_movements, users

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(stock_movements.router, prefix="/stock-movements", tags=["Stock Movements"])
api_router.include_router(activity_logs.router, prefix="/activity-logs", tags=["Activity Logs"])
api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(admin.config_router, prefix="/configurations", tags=["Configurations"])
api_router.include_router(admin.backup_router, prefix="/backup", tags=["Backup"])
api_router.include_router(admin.dashboard_router, prefix="/dashboard", tags=["Dashboard"])
