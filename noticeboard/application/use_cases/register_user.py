from ...domain.entities import Requester, Role, User
from ...domain.errors import AuthorizationError, ValidationError
from ...domain.policy import REGISTRABLE_ROLES, can_register_users

class IUserRepository:
    def get_by_username(self, username: str) -> User | None: ...
    def get_with_hash(self, username: str) -> tuple[User, str] | None: ...
    def create(self, username: str, password_hash: str, role: Role = Role.STUDENT) -> User: ...

class IPasswordHasher:
    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, hashed: str) -> bool: ...

class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, requester: Requester, username: str, password: str, role: str) -> User:
        if not can_register_users(requester.role):
            raise AuthorizationError("Only admin can add users")
        try:
            new_role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role")
        if new_role not in REGISTRABLE_ROLES:
            raise ValidationError("Invalid role")
        if self.repo.get_by_username(username):
            raise ValidationError("Username already exists")
        pwd_hash = self.hasher.hash(password)
        return self.repo.create(username, pwd_hash, new_role)
