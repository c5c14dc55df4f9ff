"""
Sanitização e prefixo de assunto de tickets.

Pipeline de sanitize_subject:
1. Remove espaços nas bordas
2. Remove caracteres fora de [A-Za-z0-9_], espaços (inclusive Unicode) e - . , ! ? ( ) & @ # $ %
3. Remove palavras alfabéticas isoladas com 8+ letras (tokens aleatórios)
4. Colapsa espaços consecutivos (NBSP, tab, quebra de linha) em um só

A função é idempotente: sanitize(sanitize(x)) == sanitize(x).

O assunto persistido carrega a classificação como prefixo:
    "[Payroll - Salary Slip] Need slip"
"""

import re
from typing import Optional, Tuple

_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9_\s\-.,!?()&@#$%]")
_RANDOM_TOKEN = re.compile(r"\b[a-z]{8,}\b", re.ASCII | re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_PREFIX = re.compile(r"^\[(.+?) - (.+?)\] (.+)$", re.DOTALL)


def sanitize_subject(text: Optional[str]) -> str:
    """
    Limpa o assunto informado pelo usuário.

    Example:
        >>> sanitize_subject("  Need slip xkqzpwmrtv  now!! <script> ")
        'Need slip now!! script'
    """
    cleaned = (text or "").strip()
    cleaned = _DISALLOWED_CHARS.sub("", cleaned)
    cleaned = _RANDOM_TOKEN.sub("", cleaned)
    cleaned = _WHITESPACE.sub(" ", cleaned)
    return cleaned.strip()


def build_subject(subject: str, category: str, subcategory: str) -> str:
    """
    Monta o assunto persistido.

    Args:
        subject: Assunto já sanitizado
        category: Categoria (pode ser vazia)
        subcategory: Subcategoria (pode ser vazia)

    Returns:
        "[category - subcategory] subject" quando ambos existem,
        senão apenas o assunto.
    """
    if category and subcategory:
        return f"[{category} - {subcategory}] {subject}"
    return subject


def split_subject_prefix(subject: str) -> Tuple[str, str, str]:
    """
    Separa um prefixo de classificação existente.

    Returns:
        (category, subcategory, rest); category e subcategory vazios
        quando o assunto não tem prefixo.
    """
    match = _PREFIX.match(subject or "")
    if not match:
        return "", "", subject or ""
    return match.group(1), match.group(2), match.group(3)
