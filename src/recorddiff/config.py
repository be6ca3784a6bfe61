# -*- coding: utf-8 -*-
"""
Configuration and constants for recorddiff.
"""
import os
import re
from dataclasses import dataclass, asdict, fields, replace
from typing import Optional

# Token separators: anything that is not a word character or Cyrillic.
_token_split_re = re.compile(r"[^\w\u0400-\u04FF]+", re.U)

# Character-level diff guards
TEXT_DIFF_MAX_LENGTH = 4000
TEXT_DIFF_MAX_AREA = 200000

# Row similarity
SIGNATURE_SEPARATOR = u'|'
COLUMN_KEY_SEPARATOR = u'\u0001'
TOKEN_SIMILARITY_MIN_LENGTH = 300
SIMILAR_THRESHOLD = 0.6

# Alignment costs
DELETE_COST = 1
INSERT_COST = 1
DISSIMILAR_COST = 2

# Text summaries
MAX_TEXT_LENGTH = 200
ELLIPSIS = u'…'
CIRCULAR_SENTINEL = u'[Circular]'
ROOT_PATH = 'ROOT'

# Keys probed (in order) for an explicit row id
ROW_ID_KEYS = ('id', '$id', 'key')

ENV_PREFIX = 'RECORDDIFF_'


def _env_bool(value):
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class DiffOptions:
    """
    Runtime options for table alignment and move detection.

    Every public entry point accepts an explicit ``options`` argument; when
    omitted the process-wide options from :func:`get_diff_options` apply.
    """

    # Above n*m rows the DP alignment is skipped for the id-based fallback.
    max_align_cells: int = 50000
    # Emit one informational log record per alignment decision.
    log_decisions: bool = False
    # Minimum row similarity for a pair to be a move candidate.
    move_similarity_threshold: float = 0.8
    # Move detection is disabled when more candidate pairs than this exist.
    move_max_pairs: int = 5000

    @classmethod
    def from_env(cls, environ=None) -> 'DiffOptions':
        """Load options from ``RECORDDIFF_*`` environment variables."""
        environ = os.environ if environ is None else environ
        defaults = cls()

        def _get(name, default, convert):
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None or raw == '':
                return default
            return convert(raw)

        return cls(
            max_align_cells=_get('max_align_cells', defaults.max_align_cells, int),
            log_decisions=_get('log_decisions', defaults.log_decisions, _env_bool),
            move_similarity_threshold=_get(
                'move_similarity_threshold', defaults.move_similarity_threshold, float),
            move_max_pairs=_get('move_max_pairs', defaults.move_max_pairs, int),
        )

    def validate(self) -> tuple:
        """Validate options and return (is_valid, errors)."""
        errors = []
        if self.max_align_cells < 0:
            errors.append("max_align_cells must be >= 0")
        if not 0.0 <= self.move_similarity_threshold <= 1.0:
            errors.append("move_similarity_threshold must be within 0..1")
        if self.move_max_pairs < 0:
            errors.append("move_max_pairs must be >= 0")
        return (len(errors) == 0, errors)

    def to_dict(self):
        return asdict(self)


# Process-wide options
_options: Optional[DiffOptions] = None


def _current() -> DiffOptions:
    global _options
    if _options is None:
        _options = DiffOptions()
    return _options


def get_diff_options() -> DiffOptions:
    """Return a copy of the process-wide options."""
    return replace(_current())


def set_diff_options(options=None, **overrides) -> DiffOptions:
    """
    Replace the process-wide options.

    Accepts a full :class:`DiffOptions` and/or keyword overrides applied on
    top of the current values. Raises ``TypeError`` for unknown option names
    and ``ValueError`` when the result does not validate.
    """
    global _options
    known = set(f.name for f in fields(DiffOptions))
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise TypeError("Unknown diff option(s): %s" % ', '.join(unknown))
    base = options if options is not None else _current()
    candidate = replace(base, **overrides)
    is_valid, errors = candidate.validate()
    if not is_valid:
        raise ValueError("Invalid diff options: %s" % '; '.join(errors))
    _options = candidate
    return replace(candidate)


def reset_diff_options() -> DiffOptions:
    """Restore the default options (for testing)."""
    global _options
    _options = DiffOptions()
    return replace(_options)


def resolve_options(options=None) -> DiffOptions:
    """Options to use for one comparison call."""
    return options if options is not None else _current()
