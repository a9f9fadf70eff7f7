"""ECS Fargate infrastructure for the Spring Boot backend service.

This package declares the VPC, ECS cluster, load-balanced Fargate service,
IAM roles and log group that run the backend container image, and hands
them to the CDK toolkit for synthesis and deployment.
"""

from .deployment_config import DeploymentConfig, load_deployment_config
from .ecs_stack import EcsStack
from .topology import StackTopology, plan_topology

__all__ = [
    "DeploymentConfig",
    "EcsStack",
    "StackTopology",
    "load_deployment_config",
    "plan_topology",
]
