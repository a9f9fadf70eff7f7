"""Deployment configuration for the Spring Boot ECS Fargate service.

The configuration is supplied once at the entry point and every resource
of the stack derives from it. Values come from the reference deployment
literals, optionally overridden by CDK context keys, while the target
account and region are taken from the CDK environment variables.
"""

import os
from typing import Any

from aws_cdk import Environment
from constructs import Node
from pydantic import BaseModel, Field

from .constants import (
    DEFAULT_CONTAINER_PORT,
    DEFAULT_IMAGE_TAG,
    DEFAULT_REGION,
    DEFAULT_REPO_NAME,
    DEFAULT_SPRING_PROFILE,
    DEFAULT_STACK_ID,
    DEFAULT_TABLE_NAME,
)

# CDK context key -> DeploymentConfig field
CONTEXT_KEYS: dict[str, str] = {
    "repoName": "repo_name",
    "imageTag": "image_tag",
    "containerPort": "container_port",
    "tableName": "table_name",
    "springProfile": "spring_profile",
    "stackId": "stack_id",
}


class DeploymentConfig(BaseModel):
    """Parameters of a single service deployment.

    Attributes:
        repo_name: ECR repository holding the application image.
        image_tag: Image tag to deploy.
        container_port: Port the container listens on. Required, no default.
        table_name: DynamoDB table name handed to the application.
        spring_profile: Active Spring profile handed to the application.
        account: Target AWS account, None for an account-agnostic stack.
        region: Target AWS region.
        stack_id: CloudFormation stack identifier.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    repo_name: str = Field(min_length=1)
    image_tag: str = Field(min_length=1)
    container_port: int = Field(gt=0, le=65535)
    table_name: str = Field(min_length=1)
    spring_profile: str = Field(default=DEFAULT_SPRING_PROFILE, min_length=1)
    account: str | None = None
    region: str = Field(default=DEFAULT_REGION, min_length=1)
    stack_id: str = Field(default=DEFAULT_STACK_ID, min_length=1)

    def to_environment(self) -> Environment:
        """Build the CDK environment targeted by this deployment."""
        return Environment(account=self.account, region=self.region)


def resolve_region() -> str:
    """Resolve the deployment region from the CDK environment variables."""
    return (
        os.environ.get("CDK_DEFAULT_REGION")
        or os.environ.get("AWS_DEFAULT_REGION")
        or DEFAULT_REGION
    )


def load_deployment_config(node: Node) -> DeploymentConfig:
    """Load deployment configuration from defaults, CDK context and environment.

    Args:
        node: Construct node of the CDK app, used for context lookup.

    Returns:
        Validated deployment configuration.

    Raises:
        pydantic.ValidationError: If a resolved value violates the model.
    """
    values: dict[str, Any] = {
        "repo_name": DEFAULT_REPO_NAME,
        "image_tag": DEFAULT_IMAGE_TAG,
        "container_port": DEFAULT_CONTAINER_PORT,
        "table_name": DEFAULT_TABLE_NAME,
        "spring_profile": DEFAULT_SPRING_PROFILE,
    }
    for context_key, field_name in CONTEXT_KEYS.items():
        value = node.try_get_context(context_key)
        if value is not None:
            values[field_name] = value

    values["account"] = os.environ.get("CDK_DEFAULT_ACCOUNT")
    values["region"] = resolve_region()
    return DeploymentConfig(**values)
