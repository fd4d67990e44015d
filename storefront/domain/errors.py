# storefront/domain/errors.py


class CartConflictError(RuntimeError):
    """Unique (user, product, size) key was hit by a concurrent write. Safe to retry."""
