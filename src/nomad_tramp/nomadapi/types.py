"""Raw API response types for the Nomad HTTP API.

Pydantic models representing the allocation stubs returned by the
``/v1/allocations`` and ``/v1/job/:job_id/allocations`` endpoints. Field
names follow Python conventions; the API's PascalCase names are accepted
through aliases. Unknown fields are ignored.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RawTaskState(BaseModel):
    """Per-task status record from an allocation's ``TaskStates``."""

    model_config = ConfigDict(populate_by_name=True)

    client_status: str = Field("", alias="ClientStatus")
    state: str = Field("", alias="State")
    failed: bool = Field(False, alias="Failed")


class RawAllocation(BaseModel):
    """Raw allocation stub from the Nomad HTTP API.

    ``task_states`` keeps the key order of the JSON document, which decides
    the default task when an address names none.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Core identification
    id: str = Field(alias="ID")
    name: str = Field("", alias="Name")
    namespace: str = Field("", alias="Namespace")

    # Placement
    node_name: str = Field("", alias="NodeName")

    # Job information
    job_id: str = Field("", alias="JobID")
    job_type: str = Field("", alias="JobType")
    task_group: str = Field("", alias="TaskGroup")

    # Status
    client_status: str = Field("", alias="ClientStatus")
    task_states: dict[str, RawTaskState] = Field(
        default_factory=dict,
        alias="TaskStates",
    )

    @field_validator("task_states", mode="before")
    @classmethod
    def _null_task_states(cls, value):
        # Pending allocations report "TaskStates": null
        return {} if value is None else value
