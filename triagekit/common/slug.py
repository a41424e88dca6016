"""Repository slug and issue reference parsing.

GitHub names a repository ``owner/name`` and an issue ``owner/name#number``.
Neither is a filesystem path, so they are parsed here rather than with
``pathlib``.
"""

from __future__ import annotations


def repo_slug(owner: str, name: str) -> str:
    """Join ``owner`` and ``name`` into ``owner/name``.

    Examples
    --------
    >>> repo_slug("octo", "reef")
    'octo/reef'

    """
    return f"{owner}/{name}"


def parse_repo_slug(slug: str) -> tuple[str, str]:
    """Split an ``owner/name`` slug.

    Raises
    ------
    ValueError
        If the slug does not contain exactly one ``/`` with text on both sides.

    Examples
    --------
    >>> parse_repo_slug("octo/reef")
    ('octo', 'reef')

    """
    owner, sep, name = slug.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        msg = f"Invalid repository slug: expected 'owner/name', got {slug!r}"
        raise ValueError(msg)
    return owner, name


def issue_reference(owner: str, name: str, number: int) -> str:
    """Render issue coordinates as ``owner/name#number``."""
    return f"{repo_slug(owner, name)}#{number}"


def parse_issue_reference(reference: str) -> tuple[str, str, int]:
    """Split ``owner/name#number`` into its parts.

    Raises
    ------
    ValueError
        If the slug part is malformed or the number is not a positive integer.

    Examples
    --------
    >>> parse_issue_reference("octo/reef#7")
    ('octo', 'reef', 7)

    """
    slug, sep, raw_number = reference.strip().rpartition("#")
    if not sep:
        msg = f"Invalid issue reference: expected 'owner/name#number', got {reference!r}"
        raise ValueError(msg)
    owner, name = parse_repo_slug(slug)
    if not raw_number.isdigit() or int(raw_number) < 1:
        msg = f"Invalid issue number in {reference!r}"
        raise ValueError(msg)
    return owner, name, int(raw_number)
