class RuleTreeError(Exception):
    """Base exception for all ruletree errors.

    All other exceptions in this package inherit from this class,
    allowing callers to catch every ruletree-related error with
    a single except clause. Errors raised by user-supplied actions
    are not wrapped and keep their own types.
    """


class NoMatchError(RuleTreeError):
    """Raised when no branch of a tree applies to the input.

    Common causes:
        - No child condition validated and the node has no ``ELSE`` entry
        - An action raised it to decline the input; under ``REPEAT`` the
          enclosing tree then moves on to the next candidate branch
    """


class RuleAssertionError(RuleTreeError):
    """Raised by an ``assert_condition()`` action whose condition is false.

    The message is the description of the assert action, e.g.
    ``"assert age>11"``.
    """


class RuleDefinitionError(RuleTreeError):
    """Raised when a rule is authored incorrectly.

    Common causes:
        - An ``if_()`` condition that is not a ``Condition``
        - An ``if_()`` target that is neither a ``Node``, a ``Runner``
          nor a callable
        - More than one ``ELSE`` entry in a single node (unless the
          compiler allows it)
        - Composing ``ELSE`` with ``and_()``, ``or_()`` or ``not_()``
    """


class RuleEvaluationError(RuleTreeError):
    """Raised when a condition fails while validating an input.

    Common causes:
        - Ordering comparison between incompatible types
          (e.g. ``None > 11``)
        - Membership test against a value that is not a container
    """
