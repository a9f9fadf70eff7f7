"""Plain-data description of the service topology.

The records in this module describe every resource of the stack without
touching CDK constructs. Ownership is explicit: the service holds its task,
the task holds its roles and containers. ``EcsStack`` renders a
``StackTopology`` into CDK constructs.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from aws_cdk import aws_logs as logs

from .constants import (
    DESIRED_COUNT,
    DYNAMODB_FULL_ACCESS_POLICY,
    ECS_TASKS_PRINCIPAL,
    ENV_AWS_REGION,
    ENV_SPRING_PROFILE,
    ENV_TABLE_NAME,
    FARGATE_CPU_MEMORY,
    HEALTH_CHECK_INTERVAL_SECONDS,
    HEALTH_CHECK_PATH,
    HEALTHY_HTTP_CODES,
    LOAD_BALANCER_DNS_OUTPUT,
    LOG_RETENTION,
    LOG_STREAM_PREFIX,
    MAX_AZS,
    NAT_GATEWAYS,
    PUBLIC_SUBNET_NAME,
    TASK_CPU,
    TASK_EXECUTION_POLICY,
    TASK_MEMORY_MIB,
)
from .deployment_config import DeploymentConfig


@dataclass(frozen=True)
class NetworkTopology:
    """VPC layout.

    Attributes:
        max_azs: Number of availability zones spanned by the VPC.
        nat_gateways: Number of NAT gateways, always zero.
        subnet_group: Name of the single public subnet group.
    """

    max_azs: int = MAX_AZS
    nat_gateways: int = NAT_GATEWAYS
    subnet_group: str = PUBLIC_SUBNET_NAME

    def __post_init__(self):
        if self.max_azs < 1:
            raise ValueError(f"VPC needs at least one availability zone, got {self.max_azs}")
        if self.nat_gateways != 0:
            raise ValueError(
                f"NAT gateways are not provisioned for this topology, got {self.nat_gateways}",
            )


@dataclass(frozen=True)
class RolePolicy:
    """IAM role assumed by ECS tasks."""

    construct_id: str
    description: str
    managed_policies: tuple[str, ...]
    trusted_principal: str = ECS_TASKS_PRINCIPAL


@dataclass(frozen=True)
class ContainerSpec:
    """Application container definition.

    Attributes:
        construct_id: Construct id of the container within the task definition.
        repo_name: ECR repository name of the image.
        image_tag: Image tag to run.
        environment: Environment variables handed to the application.
        container_port: Single port mapping of the container.
        stream_prefix: CloudWatch log stream prefix.
    """

    construct_id: str
    repo_name: str
    image_tag: str
    environment: Mapping[str, str]
    container_port: int
    stream_prefix: str = LOG_STREAM_PREFIX

    def __post_init__(self):
        object.__setattr__(self, "environment", MappingProxyType(dict(self.environment)))


@dataclass(frozen=True)
class TaskSpec:
    """Fargate task definition with its roles and containers."""

    execution_role: RolePolicy
    task_role: RolePolicy
    containers: tuple[ContainerSpec, ...]
    cpu: int = TASK_CPU
    memory_mib: int = TASK_MEMORY_MIB

    def __post_init__(self):
        if self.memory_mib not in FARGATE_CPU_MEMORY.get(self.cpu, ()):
            raise ValueError(
                f"Invalid Fargate CPU/memory combination: {self.cpu}/{self.memory_mib}",
            )
        if len(self.containers) != 1:
            raise ValueError(
                f"Task definition must hold exactly one container, got {len(self.containers)}",
            )

    @property
    def container(self) -> ContainerSpec:
        return self.containers[0]


@dataclass(frozen=True)
class HealthCheckPolicy:
    """Load balancer target group health check."""

    path: str = HEALTH_CHECK_PATH
    healthy_http_codes: str = HEALTHY_HTTP_CODES
    interval_seconds: int = HEALTH_CHECK_INTERVAL_SECONDS


@dataclass(frozen=True)
class ServiceTopology:
    """Load-balanced Fargate service bound to the cluster."""

    task: TaskSpec
    health_check: HealthCheckPolicy = field(default_factory=HealthCheckPolicy)
    desired_count: int = DESIRED_COUNT
    public_load_balancer: bool = True
    assign_public_ip: bool = True


@dataclass(frozen=True)
class StackTopology:
    """Complete resource graph of the deployment."""

    network: NetworkTopology
    service: ServiceTopology
    log_retention: logs.RetentionDays = LOG_RETENTION
    output_id: str = LOAD_BALANCER_DNS_OUTPUT


def build_container_environment(config: DeploymentConfig, region: str) -> dict[str, str]:
    """Environment variables read by the Spring application.

    Args:
        config: Deployment configuration.
        region: Region the stack is deployed to.

    Returns:
        Mapping with the table name, active profile and region.
    """
    return {
        ENV_TABLE_NAME: config.table_name,
        ENV_SPRING_PROFILE: config.spring_profile,
        ENV_AWS_REGION: region,
    }


def plan_topology(config: DeploymentConfig, region: str | None = None) -> StackTopology:
    """Describe the full stack for a deployment configuration.

    Args:
        config: Deployment configuration.
        region: Region value handed to the container, defaults to
            ``config.region``. ``EcsStack`` passes its own region here.

    Returns:
        Immutable topology of the stack.
    """
    # Both roles get full DynamoDB access as requested by the service owners
    execution_role = RolePolicy(
        construct_id="ExecutionRole",
        description=(
            "Execution role for ECS tasks (ECR pull, logs, + DynamoDB FullAccess as requested)"
        ),
        managed_policies=(TASK_EXECUTION_POLICY, DYNAMODB_FULL_ACCESS_POLICY),
    )
    task_role = RolePolicy(
        construct_id="TaskRole",
        description="Application task role (DynamoDB FullAccess as requested)",
        managed_policies=(DYNAMODB_FULL_ACCESS_POLICY,),
    )
    container = ContainerSpec(
        construct_id="AppContainer",
        repo_name=config.repo_name,
        image_tag=config.image_tag,
        environment=build_container_environment(config, region or config.region),
        container_port=config.container_port,
    )
    task = TaskSpec(
        execution_role=execution_role,
        task_role=task_role,
        containers=(container,),
    )
    return StackTopology(
        network=NetworkTopology(),
        service=ServiceTopology(task=task),
    )
