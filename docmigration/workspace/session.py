from dataclasses import dataclass

from docmigration.config.settings import Settings


@dataclass(frozen=True)
class Session:
    """Credentials of the signed-in user, passed explicitly to every collaborator call.

    The token may be empty: offline collaborators ignore it, and the Google
    adapters refuse to send a request without one.
    """

    access_token: str = ""
    user_email: str = ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token.strip())

    @property
    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    @classmethod
    def from_settings(cls, settings: Settings) -> "Session":
        return cls(
            access_token=settings.google_access_token,
            user_email=settings.google_user_email,
        )
