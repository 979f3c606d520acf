"""
Mounjaro Tracker Backend — Application Context
================================================

What:  One explicitly constructed object holding every long-lived
       collaborator: database, token codec, password hasher, route table,
       session readers and domain services.
Why:   No ambient singletons. The process entry point (create_app) builds
       the context once, middleware receives it by reference, and route
       handlers reach it through the get_context dependency. Tests build
       their own context from their own Settings.
Lifecycle:
    create_app(settings) → AppContext.from_settings(settings)
    lifespan startup     → database.create_all() (when enabled)
    lifespan shutdown    → database.dispose()

Wiring (leaves first):
    PasswordHasher, UserService ─▶ CredentialAuthenticator
    SessionTokenCodec ─▶ OptimisticSessionReader        (edge gate)
    SessionTokenCodec, UserService, ProfileService ─▶ AuthoritativeSessionVerifier
"""

from dataclasses import dataclass
from datetime import timedelta

from tracker.config import Settings
from tracker.database import Database
from tracker.security.authenticator import CredentialAuthenticator
from tracker.security.optimistic import OptimisticSessionReader
from tracker.security.passwords import PasswordHasher
from tracker.security.route_table import RouteTable
from tracker.security.session_token import SessionTokenCodec
from tracker.security.verifier import AuthoritativeSessionVerifier
from tracker.services.auth_service import AuthService
from tracker.services.password_reset_service import PasswordResetService
from tracker.services.profile_service import ProfileService
from tracker.services.push_service import PushService
from tracker.services.user_service import UserService


@dataclass
class AppContext:
    settings: Settings
    database: Database
    route_table: RouteTable
    token_codec: SessionTokenCodec
    password_hasher: PasswordHasher
    optimistic_reader: OptimisticSessionReader
    session_verifier: AuthoritativeSessionVerifier
    authenticator: CredentialAuthenticator
    users: UserService
    profiles: ProfileService
    auth_service: AuthService
    password_resets: PasswordResetService
    push: PushService

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        database = Database.from_settings(settings)
        codec = SessionTokenCodec(
            secret=settings.auth_secret,
            max_age=timedelta(days=settings.session_max_age_days),
        )
        hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        users = UserService()
        profiles = ProfileService()

        return cls(
            settings=settings,
            database=database,
            route_table=RouteTable(),
            token_codec=codec,
            password_hasher=hasher,
            optimistic_reader=OptimisticSessionReader(codec),
            session_verifier=AuthoritativeSessionVerifier(codec, users, profiles),
            authenticator=CredentialAuthenticator(users, hasher),
            users=users,
            profiles=profiles,
            auth_service=AuthService(users, hasher),
            password_resets=PasswordResetService(
                users,
                hasher,
                base_url=settings.app_base_url,
                expiry=timedelta(hours=settings.password_reset_expiry_hours),
            ),
            push=PushService(),
        )
