"""SQSSettings — region, endpoint and credentials for the SQS client."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from ..exceptions import ValidationError


class SQSSettings(BaseModel):
    """Connection settings supplied by the host application.

    Leave both keys unset to use the botocore default credential chain
    (environment, shared config, instance profile). ``endpoint_url`` points
    the client at an alternative service URL such as localstack.
    """

    model_config = ConfigDict(frozen=True)

    region_name: str = "us-east-1"
    endpoint_url: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``AioSession.create_client`` (region excluded)."""
        if not self.region_name.strip():
            raise ValidationError({"region_name": ["region_name is required"]})
        if bool(self.aws_access_key_id) != bool(self.aws_secret_access_key):
            raise ValidationError(
                {
                    "credentials": [
                        "aws_access_key_id and aws_secret_access_key "
                        "must be given together"
                    ]
                }
            )
        kwargs: dict[str, Any] = {}
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        if self.aws_access_key_id:
            kwargs["aws_access_key_id"] = self.aws_access_key_id
            kwargs["aws_secret_access_key"] = self.aws_secret_access_key
        return kwargs
