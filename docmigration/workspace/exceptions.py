class CollaboratorError(Exception):
    """Raised when a remote Drive, Docs or Sheets call fails."""


class CollaboratorAuthError(CollaboratorError):
    """Raised when the access token is missing, invalid or expired."""


class CollaboratorPermissionError(CollaboratorError):
    """Raised when the user may not access the requested resource."""


class CollaboratorNotFoundError(CollaboratorError):
    """Raised when the folder, document or spreadsheet does not exist."""


class CollaboratorNetworkError(CollaboratorError):
    """Raised when the remote service cannot be reached."""
