from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RelayRequest(BaseModel):
    """
    Request bodies use the bot's camelCase field names; snake_case is accepted too.

    Numeric ids (Discord and Telegram ids often arrive as JSON numbers) are read as strings.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)
