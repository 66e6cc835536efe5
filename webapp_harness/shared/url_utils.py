def join_url(base: str, path: str) -> str:
    """Join a scheme://host[:port] base and a path with exactly one slash between them."""
    return f"{base.rstrip('/')}/{path.lstrip('/')}"
