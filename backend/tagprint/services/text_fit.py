# backend/tagprint/services/text_fit.py
"""
Вписывание текста в ширину.

Функции не знают ничего о шрифтах: ширину проверяет переданный can_fit
(обычно "помещается ли строка этим шрифтом в N пунктов").
"""

from collections.abc import Callable

ELLIPSIS = "…"

CanFit = Callable[[str], bool]


def truncate_line(text: str, can_fit: CanFit, ellipsis: str = ELLIPSIS) -> str:
    """
    Обрезает строку с многоточием, если она не помещается.

    Длина префикса подбирается бинарным поиском.
    """
    if can_fit(text):
        return text

    low, high = 0, len(text)
    while low < high:
        mid = (low + high + 1) // 2
        if can_fit(text[:mid] + ellipsis):
            low = mid
        else:
            high = mid - 1

    return text[:low] + ellipsis


def _split_word(word: str, can_fit: CanFit) -> str:
    """Самый длинный помещающийся префикс слова (минимум один символ)."""
    prefix = ""
    for char in word:
        candidate = prefix + char
        if prefix and not can_fit(candidate):
            break
        prefix = candidate
    return prefix


def clamp_text_lines(text: str, max_lines: int, can_fit: CanFit) -> list[str]:
    """
    Разбивает текст на строки не длиннее ширины, максимум max_lines строк.

    Слова набираются жадно; слово шире строки режется по символам.
    Если текст не влез, остаток дописывается к последней строке и она
    обрезается с многоточием.

    Args:
        text: Исходный текст
        max_lines: Максимум строк
        can_fit: Проверка ширины строки

    Returns:
        Строки (не больше max_lines), пустой список для пустого текста
    """
    words = text.split()
    if not words or max_lines <= 0:
        return []

    lines: list[str] = []
    current = ""
    index = 0

    while index < len(words):
        word = words[index]
        candidate = f"{current} {word}" if current else word
        if can_fit(candidate):
            current = candidate
            index += 1
            continue

        if current:
            lines.append(current)
            current = ""
        else:
            # Одно слово не влезает целиком — режем по символам
            prefix = _split_word(word, can_fit)
            lines.append(prefix)
            remaining = word[len(prefix):]
            if remaining:
                words[index] = remaining
            else:
                index += 1

        if len(lines) >= max_lines:
            break

    if len(lines) < max_lines and current:
        lines.append(current)

    if index < len(words):
        last = len(lines) - 1
        rest = " ".join(words[index:])
        lines[last] = truncate_line(f"{lines[last]} {rest}", can_fit)

    return lines
