from jose import JWTError, jwt

from app.core.config import settings
from app.core.exceptions import UnauthorizedError


def decode_access_token(token: str) -> str:
    """Supabase 액세스 토큰 검증 후 user_id(sub) 반환

    Args:
        token: Bearer JWT

    Returns:
        토큰의 sub 클레임

    Raises:
        UnauthorizedError: 서명/만료/audience 검증 실패 또는 sub 누락
    """
    if not settings.supabase_jwt_secret:
        raise UnauthorizedError("JWT 시크릿이 설정되지 않았습니다")

    try:
        payload = jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError as e:
        raise UnauthorizedError(f"토큰 검증 실패: {type(e).__name__}") from e

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("토큰에 사용자 ID가 없습니다")
    return user_id
