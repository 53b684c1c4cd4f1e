from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer


bearer_scheme = HTTPBearer(auto_error=False)


def extract_optional_bearer_token(
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    """Return the Bearer token from authorization credentials, if any.

    A missing header means the request is unauthenticated and yields None.

    Raises:
        HTTPException: If credentials are present but malformed or empty.
    """

    if credentials is None:
        return None

    if credentials.scheme.lower() != "bearer" or not credentials.credentials.strip():
        raise HTTPException(
            status_code=401,
            detail="Authorization header must carry a Bearer token",
        )

    return credentials.credentials.strip()
