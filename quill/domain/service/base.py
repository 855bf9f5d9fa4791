"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the post lifecycle logic that spans several
    repositories (posts, tags, info, comments).
    """

    pass
