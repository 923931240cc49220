"""Base model configuration for all tool payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Model(BaseModel):
    """Base model for JSON emitted by xcodebuild and xcresulttool.

    Field names are snake_case in Python and camelCase on the wire. Unknown
    keys are ignored since the tools add fields between Xcode releases.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )
