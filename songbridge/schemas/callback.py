"""
Pydantic schemas for provider webhook callbacks.
"""
from typing import Optional, List
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CallbackTrack(BaseModel):
    """One generated track inside a callback."""
    model_config = ConfigDict(extra='allow')

    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    title: Optional[str] = None


class CallbackData(BaseModel):
    """The ``data`` envelope of a callback."""
    model_config = ConfigDict(extra='allow')

    task_id: Optional[str] = Field(None, validation_alias=AliasChoices('task_id', 'taskId'))
    callback_type: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('callbackType', 'callback_type'),
    )
    data: Optional[List[CallbackTrack]] = None


class CallbackPayload(BaseModel):
    """Top-level callback body POSTed by the provider."""
    model_config = ConfigDict(extra='allow')

    code: Optional[int] = None
    msg: str = Field(..., min_length=1)
    data: CallbackData


class CallbackAck(BaseModel):
    """Acknowledgment returned to the provider."""
    message: str
