import logging

from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool
from twilio.twiml.messaging_response import MessagingResponse

from iara_relay.api.v1.pipeline import IdentificationPipeline
from iara_relay.api.v1.response_formatter import GENERIC_APOLOGY_MESSAGE
from iara_relay.core.config import get_settings
from iara_relay.schemas.inbound import InboundMessage

logger = logging.getLogger("iara_relay.webhook")

router = APIRouter()


def get_pipeline():
    # one pipeline per request: HTTP sessions and their cookies are never shared between senders
    pipeline = IdentificationPipeline(get_settings())
    try:
        yield pipeline
    finally:
        pipeline.close()


def twiml_reply(text: str) -> Response:
    twiml = MessagingResponse()
    twiml.message(text)
    return Response(content=str(twiml), media_type="text/xml")


@router.post("/whatsapp")
async def whatsapp_webhook(request: Request, pipeline: IdentificationPipeline = Depends(get_pipeline)):
    """
    Twilio WhatsApp webhook. Always answers with a TwiML message, including on failure.
    """
    try:
        form = await request.form()
        message = InboundMessage.from_twilio_form(form)
        # the pipeline blocks on HTTP calls; keep it off the event loop
        reply = await run_in_threadpool(pipeline.handle, message)
    except Exception:
        logger.exception("Webhook failed")
        reply = GENERIC_APOLOGY_MESSAGE

    return twiml_reply(reply)
