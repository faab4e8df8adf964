import logging
from datetime import datetime, timezone
from typing import Sequence

from iara_relay.api.v1.response_formatter import (
    GENERIC_APOLOGY_MESSAGE,
    UNSUPPORTED_ATTACHMENT_MESSAGE,
    format_identification_message,
    text_invitation_prompt,
)
from iara_relay.core.config import Settings
from iara_relay.core.errors import MediaFetchError
from iara_relay.schemas.identify import Candidate, NotRegistered, RegistrationOutcome
from iara_relay.schemas.inbound import InboundMessage
from iara_relay.services.inaturalist import INaturalistClient
from iara_relay.services.media import MediaFetcher
from iara_relay.services.policy import should_register
from iara_relay.services.style import StyleGenerator

logger = logging.getLogger("iara_relay.pipeline")


def today_utc() -> str:
    return datetime.now(timezone.utc).date().isoformat()


class IdentificationPipeline:
    """
    Routes one inbound message to a reply.

    Image messages go through fetch -> rank -> decide -> (register) -> compose.
    Only a failed download aborts the image path; ranking, registration and
    styling failures degrade to a narrower reply.
    """

    def __init__(
        self,
        settings: Settings,
        fetcher: MediaFetcher | None = None,
        inaturalist: INaturalistClient | None = None,
        styler: StyleGenerator | None = None,
    ):
        self.settings = settings
        self.fetcher = fetcher or MediaFetcher(settings)
        self.inaturalist = inaturalist or INaturalistClient(settings)
        self.styler = styler or StyleGenerator(settings)

    def close(self) -> None:
        self.fetcher.close()
        self.inaturalist.close()

    def handle(self, message: InboundMessage) -> str:
        try:
            if message.is_image:
                return self.handle_image(message)
            if message.has_attachment:
                logger.info("[ATTACHMENT] from=%s type=%s", message.sender, message.media_content_type)
                return UNSUPPORTED_ATTACHMENT_MESSAGE
            return self.handle_text(message)
        except Exception:
            logger.exception("Unexpected error handling message from %s", message.sender)
            return GENERIC_APOLOGY_MESSAGE

    def handle_text(self, message: InboundMessage) -> str:
        logger.info("[TEXT] from=%s text=%r", message.sender, message.body)
        return self.styler.rewrite(text_invitation_prompt(message.body))

    def handle_image(self, message: InboundMessage) -> str:
        logger.info(
            "[IMAGE] from=%s url=%s type=%s caption=%r",
            message.sender, message.media_url, message.media_content_type, message.caption,
        )

        try:
            image_path = self.fetcher.fetch(message.media_url)
        except MediaFetchError as e:
            logger.error("Media download failed: %s", e)
            return GENERIC_APOLOGY_MESSAGE

        try:
            observed_on = today_utc()
            candidates = self.inaturalist.rank(
                image_path,
                location=message.location,
                observed_on=observed_on,
                locale=self.settings.locale,
            )

            registration = None
            if should_register(candidates, self.settings.high_confidence):
                registration = self.inaturalist.register(
                    taxon_id=candidates[0].taxon_id,
                    image_path=image_path,
                    observed_on=observed_on,
                    location=message.location,
                )
                if isinstance(registration, NotRegistered):
                    logger.warning("Registration skipped: %s", registration.reason)

            return self.compose(candidates, registration)
        finally:
            self.fetcher.discard(image_path)

    def compose(
        self,
        candidates: Sequence[Candidate],
        registration: RegistrationOutcome | None = None,
    ) -> str:
        return self.styler.rewrite(format_identification_message(candidates, registration))
