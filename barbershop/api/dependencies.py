# ============================================================================
# FILE: barbershop/api/dependencies.py
# Authentication and tenant resolution dependencies
# ============================================================================
from fastapi import Depends, HTTPException, Path, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from uuid import UUID

from barbershop.config.database import get_db
from barbershop.config.settings import settings
from barbershop.models.barbershop import Barbershop

# ============================================================================
# Security Schemes
# ============================================================================

# Access tokens are issued by the hosted auth provider
jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Access token issued by the auth provider"
)


# ============================================================================
# JWT Token Functions
# ============================================================================

def verify_access_token(token: str) -> dict:
    """
    Verify and decode an access token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        options = {"verify_aud": bool(settings.AUTH_JWT_AUDIENCE)}
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE or None,
            options=options,
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has no subject",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


# ============================================================================
# JWT Authentication Dependencies
# ============================================================================

async def get_current_owner_id(
        credentials: HTTPAuthorizationCredentials = Depends(jwt_security),
) -> UUID:
    """User id (`sub`) of the authenticated shop owner"""
    payload = verify_access_token(credentials.credentials)
    try:
        return UUID(payload["sub"])
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid subject in token",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_barbershop(
        owner_id: UUID = Depends(get_current_owner_id),
        db: Session = Depends(get_db),
) -> Barbershop:
    """The shop owned by the authenticated user; every dashboard query is scoped to it"""
    barbershop = db.query(Barbershop).filter(Barbershop.owner_id == owner_id).first()
    if not barbershop:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User not associated with a barbershop"
        )
    return barbershop


# ============================================================================
# Public Dependencies
# ============================================================================

async def get_public_barbershop(
        slug: str = Path(..., description="Public slug of the barbershop"),
        db: Session = Depends(get_db),
) -> Barbershop:
    barbershop = db.query(Barbershop).filter(Barbershop.slug == slug).first()
    if not barbershop:
        raise HTTPException(status_code=404, detail="Barbershop not found")
    return barbershop
