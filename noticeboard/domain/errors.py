class NoticeBoardError(Exception):
    """Базовая ошибка доменного слоя."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthorizationError(NoticeBoardError):
    """Роль или владение не позволяют выполнить операцию."""


class NotFoundError(NoticeBoardError):
    """Запрошенная сущность отсутствует."""


class ValidationError(NoticeBoardError):
    """Некорректный или конфликтующий ввод."""


class StoreError(NoticeBoardError):
    """Сбой хранилища. Детали не отдаются клиенту."""
