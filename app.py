#!/usr/bin/env python3
"""Entry point for the Spring service ECS Fargate deployment.

This module loads the deployment configuration, resolves the target
environment and synthesizes the ECS stack.

Environment Configuration Options:
    1. AWS Named Profile:
       AWS_PROFILE: Named profile from AWS credentials file

    2. Direct Environment Variables:
       CDK_DEFAULT_ACCOUNT: Target AWS account for deployment
       CDK_DEFAULT_REGION: Target AWS region for deployment
           (falls back to AWS_DEFAULT_REGION, then us-east-1)

Deployment parameters can be overridden with CDK context, for example
``cdk deploy -c imageTag=v1.2.0 -c springProfile=staging``.
"""

import logging
import os

import boto3
from aws_cdk import App, Environment

from ecs_spring_stack import DeploymentConfig, EcsStack, load_deployment_config

logger = logging.getLogger(__name__)


def create_deployment_environment(
    config: DeploymentConfig,
    aws_profile: str | None = None,
) -> Environment:
    """Creates CDK Environment from configuration.

    Handles both AWS profile and direct environment variable configurations.

    Args:
        config: Deployment configuration with account and region.
        aws_profile: Optional AWS credentials profile to resolve the account from.

    Returns:
        CDK Environment with account and region resolved.
    """
    if aws_profile:
        session = boto3.Session(profile_name=aws_profile)
        sts = session.client("sts")
        account = sts.get_caller_identity()["Account"]
        return Environment(
            account=account,
            region=session.region_name or config.region,
        )

    return config.to_environment()


def initialize_app(
    config: DeploymentConfig | None = None,
    aws_profile: str | None = None,
    environment: str | None = None,
) -> App:
    """Initializes and configures the CDK application.

    Args:
        config: Deployment configuration. Loaded from CDK context and
            environment variables when omitted.
        aws_profile: Optional AWS credentials profile to use.
        environment: Optional deployment environment name used for tagging.

    Returns:
        Configured CDK App instance ready for synthesis.
    """
    app = App()
    if config is None:
        config = load_deployment_config(app.node)
    env = create_deployment_environment(config, aws_profile)

    logger.info(
        "Deploying %s to account %s in %s",
        config.stack_id,
        env.account or "<unresolved>",
        env.region,
    )

    EcsStack(
        app,
        config.stack_id,
        config=config,
        env=env,
        description="ECS Fargate service for the Spring Boot backend",
        tags={
            "Environment": environment or "dev",
            "Application": config.stack_id,
            "ManagedBy": "AWS-CDK",
        },
    )
    return app


def main() -> None:
    """Main execution entry point."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = initialize_app(
        aws_profile=os.environ.get("AWS_PROFILE"),
        environment=os.environ.get("ENVIRONMENT"),
    )
    app.synth()


if __name__ == "__main__":
    main()
