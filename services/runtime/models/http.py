"""
HTTP request/response models.

Typed view of the API Gateway proxy event delivered by the Runtime API and of
the proxy response handed back to it. Instances are built by
services.runtime.core.codec through explicit field projection, never by
validating a raw event against the model.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RequestModel(BaseModel):
    """Inbound HTTP-like event."""

    method: str
    path: str = "/"
    resource: Optional[str] = None
    body: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    multi_value_headers: Dict[str, List[str]] = Field(default_factory=dict)
    query_string_parameters: Dict[str, str] = Field(default_factory=dict)
    multi_value_query_string_parameters: Dict[str, List[str]] = Field(default_factory=dict)
    path_parameters: Dict[str, str] = Field(default_factory=dict)
    stage_variables: Dict[str, str] = Field(default_factory=dict)
    request_context: Dict[str, Any] = Field(default_factory=dict)
    is_base64_encoded: bool = False

    model_config = ConfigDict(frozen=True)

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return default

    def query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.query_string_parameters.get(name, default)


class ResponseModel(BaseModel):
    """
    Outbound proxy response.

    A body of None means an empty body. Optional fields left as None are not
    transmitted.
    """

    status_code: int = Field(..., ge=100, le=599)
    headers: Optional[Dict[str, str]] = None
    body: Optional[str] = None
    is_base64_encoded: Optional[bool] = None
    multi_value_headers: Optional[Dict[str, List[str]]] = None
