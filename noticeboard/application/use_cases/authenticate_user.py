from ...domain.entities import User
from .register_user import IPasswordHasher, IUserRepository

class AuthenticateUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, username: str, password: str) -> User | None:
        found = self.repo.get_with_hash(username)
        if not found:
            return None
        user, pwd_hash = found
        if not self.hasher.verify(password, pwd_hash):
            return None
        return user
