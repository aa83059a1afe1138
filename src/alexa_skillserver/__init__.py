"""Verified webhook server for Alexa custom skills."""

from .config import Settings
from .main import create_app, create_lambda_handler
from .models.dialog import DialogType
from .models.response import Response
from .services.authenticator import Authenticated, Rejected, RequestAuthenticator
from .services.dispatcher import Skill, SkillRouter
from .services.ssml import SSMLBuilder

__all__ = [
    "Authenticated",
    "DialogType",
    "Rejected",
    "RequestAuthenticator",
    "Response",
    "SSMLBuilder",
    "Settings",
    "Skill",
    "SkillRouter",
    "create_app",
    "create_lambda_handler",
]
