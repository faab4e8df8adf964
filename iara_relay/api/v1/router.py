from fastapi import APIRouter
import iara_relay.api.v1.routes.whatsapp as whatsapp

api_router = APIRouter()

api_router.include_router(
    whatsapp.router,
    prefix="",
    tags=["WhatsApp"],
)
