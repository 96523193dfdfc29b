"""
Дружелюбные сообщения об ошибках API печати.

Вместо технических сообщений пользователь видит понятные подсказки.
"""


class FriendlyError:
    """Человекопонятная ошибка с подсказкой."""

    def __init__(
        self,
        code: str,
        message: str,
        hint: str | None = None,
        details: str | None = None,
    ):
        self.code = code
        self.message = message
        self.hint = hint
        self.details = details  # Техническая инфа для поддержки

    def to_dict(self) -> dict:
        result = {"code": self.code, "message": self.message}
        if self.hint:
            result["hint"] = self.hint
        if self.details:
            result["details"] = self.details
        return result


# === Ошибки ввода ===

BARCODE_CONFIRMATION_REQUIRED = FriendlyError(
    code="BARCODE_CONFIRMATION_REQUIRED",
    message="У товаров «{names}» нет штрихкода",
    hint="Подтвердите печать без штрихкода или укажите штрихкод в карточке товара",
)


def labels_limit_error(requested: int, limit: int) -> FriendlyError:
    """Слишком много ценников в одном запросе."""
    return FriendlyError(
        code="LABELS_LIMIT_EXCEEDED",
        message=f"Слишком много ценников: {requested}, максимум {limit}",
        hint="Разбейте печать на несколько частей",
        details=f"requested={requested}, limit={limit}",
    )


# === Серверные ошибки ===

RENDER_FAILED = FriendlyError(
    code="RENDER_FAILED",
    message="Не удалось сформировать PDF",
    hint="Попробуйте ещё раз. Если ошибка повторяется, обратитесь в поддержку",
)


# === Утилиты ===


def get_friendly_error(error_key: str, **kwargs) -> FriendlyError:
    """
    Получить дружелюбную ошибку по ключу.

    Args:
        error_key: Ключ ошибки (например, "render_failed")
        **kwargs: Параметры для форматирования (например, names="Чай, Сахар")

    Returns:
        FriendlyError с заполненными параметрами
    """
    errors = {
        "barcode_confirmation_required": BARCODE_CONFIRMATION_REQUIRED,
        "render_failed": RENDER_FAILED,
    }

    error = errors.get(error_key, RENDER_FAILED)

    # Форматируем сообщение с параметрами
    if kwargs:
        message = error.message.format(**kwargs) if "{" in error.message else error.message
        hint = error.hint.format(**kwargs) if error.hint and "{" in error.hint else error.hint
        return FriendlyError(code=error.code, message=message, hint=hint, details=error.details)

    return error
