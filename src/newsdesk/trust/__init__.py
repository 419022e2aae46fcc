"""
In-process integration harness for newsdesk.

Drives authenticated multi-step HTTP flows against the application router
(no socket) and verifies responses and stored records with aggregated,
chainable checks.
"""
from .app_controller import AppController
from .assembler import BOUNDARY, AssembledRequest, Encoding, FieldMap, RequestShape, assemble, form_fields
from .config import TrustSettings
from .contracts import Article, ArticleRepository, Role, User, UserRepository
from .dispatcher import CapturedResponse, Dispatcher, Router, WsgiRouter
from .errors import (
    AuthenticationError,
    CollaboratorError,
    DispatchError,
    EncodingError,
    MissingCredentialError,
    TrustError,
    Unauthenticated,
    ValidationError,
)
from .media import FileField, any_png
from .report import ABSENT, Mismatch, VerificationReport
from .response_verifier import LoginResponseVerifier, ResponseVerifier
from .session import SessionContext

__all__ = [
    'ABSENT',
    'AppController',
    'Article',
    'ArticleRepository',
    'AssembledRequest',
    'AuthenticationError',
    'BOUNDARY',
    'CapturedResponse',
    'CollaboratorError',
    'DispatchError',
    'Dispatcher',
    'Encoding',
    'EncodingError',
    'FieldMap',
    'FileField',
    'LoginResponseVerifier',
    'Mismatch',
    'MissingCredentialError',
    'RequestShape',
    'ResponseVerifier',
    'Role',
    'Router',
    'SessionContext',
    'TrustError',
    'TrustSettings',
    'Unauthenticated',
    'User',
    'UserRepository',
    'ValidationError',
    'VerificationReport',
    'WsgiRouter',
    'any_png',
    'assemble',
    'form_fields',
]
