from uuid import UUID

from fastapi import Header

from shiftplan.scheduling.assignments import Actor


def get_actor(
    x_actor_id: UUID = Header(..., description="Id of the acting worker / administrator"),
    x_actor_role: str = Header(..., description="ADMIN, MANAGER or EMPLOYEE"),
) -> Actor:
    """The acting identity, passed explicitly on every request."""
    return Actor(actor_id=x_actor_id, role=x_actor_role)
