"""Exceptions raised by the provisioning workflow."""


class HaloCallError(Exception):
    """Base exception for provisioning errors."""

    def __init__(self, message: str, hint: str | None = None):
        self.message = message
        self.hint = hint
        super().__init__(self.message)


class ConfigurationError(HaloCallError):
    """Required configuration is missing or invalid."""

    pass


class NoCustomersError(HaloCallError):
    """No customer has an active merchant connection."""

    pass


class NoLocationsError(HaloCallError):
    """The selected organization has no synced locations."""

    pass


class PhoneNumberInUseError(HaloCallError):
    """The phone number is already assigned to a location."""

    def __init__(self, phone_number: str):
        self.phone_number = phone_number
        super().__init__(f"Phone number {phone_number} is already in use")


class ProvisioningError(HaloCallError):
    """A write against the store failed."""

    pass


class SetupDeclined(Exception):
    """The operator chose not to continue; nothing was written."""

    def __init__(self, message: str = "No changes made."):
        self.message = message
        super().__init__(self.message)
