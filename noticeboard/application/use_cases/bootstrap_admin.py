from ...domain.entities import Role, User
from .register_user import IPasswordHasher, IUserRepository

class BootstrapAdmin:
    """Создаёт первого администратора. Через API админа создать нельзя."""

    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, username: str, password: str) -> User | None:
        if self.repo.get_by_username(username):
            return None
        return self.repo.create(username, self.hasher.hash(password), Role.ADMIN)
