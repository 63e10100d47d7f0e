"""Keep task board lists in step with card due dates."""

__version__ = "0.1.0"
