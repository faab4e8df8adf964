class RelayError(Exception):
    """Base class for errors raised inside the relay."""


class MediaFetchError(RelayError):
    """The inbound media could not be downloaded. Fatal for the request."""


class RegistrationError(RelayError):
    """
    An observation could not be created or its photo could not be attached.
    `observation_id` is set when the observation exists without a photo.
    """

    def __init__(self, message: str, observation_id: int | None = None):
        super().__init__(message)
        self.observation_id = observation_id
