from fastapi import APIRouter

from crm_app.api.v1.endpoints import (
    activities,
    ai,
    chat,
    customers,
    customizations,
    dashboard,
    deals,
    health,
    settings,
    tickets,
    ui_wizard,
    workflows,
)

router = APIRouter(prefix="/api/v1")

router.include_router(ui_wizard.router)
router.include_router(customizations.router)
router.include_router(chat.router)
router.include_router(customers.router)
router.include_router(deals.router)
router.include_router(tickets.router)
router.include_router(activities.router)
router.include_router(workflows.router)
router.include_router(ai.router)
router.include_router(settings.router)
router.include_router(dashboard.router)
router.include_router(health.router)
