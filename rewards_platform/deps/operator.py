from fastapi import Header


def get_operator_identity(
    x_operator: str | None = Header(default=None, alias="X-Operator"),
) -> str | None:
    """Name of the staff member or admin acting on the request, when the client sends one."""
    if x_operator is None:
        return None
    return x_operator.strip() or None
