"""
Input tokenization.

The terminal grammar is deliberately flat: a line is split on runs of
whitespace and nothing else. There is no quoting, escaping, piping or
globbing, so `deploy "a b"` yields three tokens: 'deploy', '"a', 'b"'.

- tokenize(raw): split a raw line into tokens ("" and blank lines -> []).
- untokenize(tokens): join tokens back with single spaces. The result is
  equal to the original input in dispatch terms, not necessarily byte-for-byte
  (irregular whitespace is collapsed).
"""
from collections.abc import Iterable


def tokenize(raw, /):
    if not isinstance(raw, str):
        raise TypeError("tokenize() argument must be a string")
    return raw.split()


def untokenize(tokens, /):
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("untokenize() argument must be an iterable of strings")
    return " ".join(tokens)


__all__ = (
    "tokenize",
    "untokenize",
)
