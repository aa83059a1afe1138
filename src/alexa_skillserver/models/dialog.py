"""Dialog management enums."""

from enum import Enum


class DialogType(str, Enum):
    """Dialog directive sent back to the Alexa service."""

    DELEGATE = "Dialog.Delegate"  # Let Alexa continue the dialog
    ELICIT_SLOT = "Dialog.ElicitSlot"
    CONFIRM_SLOT = "Dialog.ConfirmSlot"
    CONFIRM_INTENT = "Dialog.ConfirmIntent"


class DialogState(str, Enum):
    """Progress of a multi-turn dialog as reported by the request."""

    STARTED = "STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class ConfirmationStatus(str, Enum):
    """Confirmation status of an intent or slot."""

    NONE = "NONE"
    CONFIRMED = "CONFIRMED"
    DENIED = "DENIED"
