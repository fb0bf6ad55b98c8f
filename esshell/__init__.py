"""Building blocks of an extensible shell: lexer, syntax trees, matching, splitting, statuses, signals and formatting."""

__version__ = "0.9.2"