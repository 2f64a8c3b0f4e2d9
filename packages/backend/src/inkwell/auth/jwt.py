"""JWT session token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
A session token is valid for 24 hours and carries the user's numeric id
and username. Nothing is stored server-side: validity is purely the
HMAC signature plus the exp claim, so there is no logout or revocation.

Only HMAC algorithms are accepted on decode. A token whose header says
"none", RS256, ES256, ... is rejected before its signature is looked at,
which closes the algorithm-confusion hole.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import jwt
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from inkwell.config import HMAC_ALGORITHMS
from inkwell.errors import InvalidOrExpiredToken, MalformedClaims, TokenSigningFailure


class TokenClaims(BaseModel):
    """Typed view of a decoded session token.

    Learn: strict=True means user_id must be a JSON integer ("7" or 7.0
    are rejected) and username a JSON string. exp is a NumericDate, which
    RFC 7519 allows to carry fractional seconds. Unknown claims are ignored.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    user_id: int
    username: str
    exp: Union[int, float]


class SessionTokenService:
    """Issues and verifies session tokens with one server-held secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_hours: int = 24,
    ):
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = timedelta(hours=expire_hours)

    def issue(
        self,
        user_id: int,
        username: str,
        now: Optional[datetime] = None,
    ) -> tuple[str, datetime]:
        """Create a signed token. Returns (token, expires_at)."""
        issued_at = now or datetime.now(timezone.utc)
        expires_at = issued_at + self.ttl
        payload = {
            "user_id": user_id,
            "username": username,
            "exp": expires_at,
            "iat": issued_at,
        }
        try:
            token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise TokenSigningFailure() from e
        return token, expires_at

    def decode(self, token: str) -> TokenClaims:
        """Verify signature, algorithm and expiry, then validate the claims.

        Raises InvalidOrExpiredToken for anything PyJWT rejects and
        MalformedClaims when user_id/username are missing or mistyped.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=list(HMAC_ALGORITHMS),
                options={"require": ["exp"]},
            )
        except jwt.InvalidTokenError as e:
            raise InvalidOrExpiredToken() from e

        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError as e:
            raise MalformedClaims() from e
