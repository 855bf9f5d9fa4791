"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ConflictError(DomainError):
    """Raised when a slug is claimed by another writer between probe and insert.

    Recovered inside the post service by retrying allocation; callers only
    see it wrapped in a PersistenceError once its retries are exhausted.
    """

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Slug already taken: {slug}")


class PersistenceError(DomainError):
    """Raised when a store write fails.

    Attributes:
        stage: Which sub-write failed ('post', 'slug', 'info', 'tags', 'comments')
        post_id: Id of the affected post, if one was assigned
    """

    def __init__(self, message: str, stage: str, post_id: int | None = None):
        self.stage = stage
        self.post_id = post_id
        super().__init__(f"{message} (stage={stage}, post_id={post_id})")
