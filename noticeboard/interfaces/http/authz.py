from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from ...domain.entities import Requester
from ...infrastructure.security import decode_token

bearer = HTTPBearer()

def get_requester(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> Requester:
    # ядро получает только (id, role); сам токен дальше не уходит
    try:
        return decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
