# votoperu/text/simplifier.py

"""Pluggable transforms for the "Simplificar" toggle on candidate proposals.

A transform is any callable taking and returning a string. The active one is
chosen by name through the TEXT_SIMPLIFIER setting.
"""

import re
from typing import Callable, Dict

TextTransform = Callable[[str], str]

_SENTENCE_END = re.compile(r'(?<=[.!?])\s+')

_registry: Dict[str, TextTransform] = {}


def register(name: str, transform: TextTransform = None):
    """Register a transform; usable as a decorator."""
    def decorator(func):
        _registry[name] = func
        return func
    if transform is not None:
        return decorator(transform)
    return decorator


def get_transform(name: str) -> TextTransform:
    try:
        return _registry[name]
    except KeyError:
        raise ValueError(f"Unknown text simplifier: {name} (available: {', '.join(available())})")


def available():
    return sorted(_registry)


@register('identity')
def identity(text: str) -> str:
    return text


@register('first_sentences')
def first_sentences(text: str, count: int = 2) -> str:
    """Keep the first `count` sentences, collapsing whitespace."""
    collapsed = ' '.join(text.split())
    sentences = [s for s in _SENTENCE_END.split(collapsed) if s]
    return ' '.join(sentences[:count])


def simplify(text, name='identity'):
    if not text:
        return text
    return get_transform(name)(text)
