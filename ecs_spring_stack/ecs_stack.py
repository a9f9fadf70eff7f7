"""ECS Fargate infrastructure for the Spring Boot service.

This module renders the planned service topology into CDK constructs:
a public-only VPC, an ECS cluster, a Fargate task definition with its
execution and task roles, the application container, and a public
Application Load Balancer in front of the service.
"""

import logging
from typing import Any

import cdk_nag
from aws_cdk import Aspects, Duration, Stack
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_ecr as ecr
from aws_cdk import aws_ecs as ecs
from aws_cdk import aws_ecs_patterns as ecs_patterns
from aws_cdk import aws_iam as iam
from aws_cdk import aws_logs as logs
from cdk_nag import NagSuppressions
from constructs import Construct

from .deployment_config import DeploymentConfig
from .outputs import OutputManager
from .topology import ContainerSpec, RolePolicy, StackTopology, plan_topology

logger = logging.getLogger(__name__)

SECURITY_CHECK_SUPPRESSIONS: list[dict[str, str]] = [
    {
        "id": "AwsSolutions-VPC7",
        "reason": "Public-only VPC without flow logs keeps the deployment NAT-free and low cost.",
    },
    {
        "id": "AwsSolutions-EC23",
        "reason": "The Application Load Balancer is intentionally internet-facing.",
    },
    {
        "id": "AwsSolutions-ELB2",
        "reason": "Load balancer access logs are not collected for this service.",
    },
    {
        "id": "AwsSolutions-IAM4",
        "reason": "AWS managed policies (task execution, DynamoDB full access) were requested.",
    },
    {
        "id": "AwsSolutions-IAM5",
        "reason": "ECR authorization token access is granted on all resources by the ECS construct.",
    },
    {
        "id": "AwsSolutions-ECS2",
        "reason": "Table name, Spring profile and region are passed as environment variables.",
    },
    {
        "id": "AwsSolutions-ECS4",
        "reason": "Container Insights is not enabled on the service cluster.",
    },
]


class EcsStack(Stack):
    """ECS infrastructure for the Spring Boot service.

    Builds every resource in a fixed order, each referencing the previous by
    construct handle: network, cluster, log group, roles, task definition,
    container, load-balanced service and the DNS output.

    Attributes:
        config: Deployment configuration the stack was built from.
        topology: Plain-data description of the rendered resources.
        vpc: Public-only VPC spanning two availability zones.
        cluster: ECS cluster bound to the VPC.
        log_group: CloudWatch log group for container logs.
        execution_role: IAM role used by ECS to launch the task.
        task_role: IAM role assumed by the running application.
        task_definition: Fargate task definition.
        container: Application container definition.
        service: Load-balanced Fargate service.
        output_manager: Manager for consistent output creation.
    """

    config: DeploymentConfig
    topology: StackTopology
    vpc: ec2.Vpc
    cluster: ecs.Cluster
    log_group: logs.LogGroup
    execution_role: iam.Role
    task_role: iam.Role
    task_definition: ecs.FargateTaskDefinition
    container: ecs.ContainerDefinition
    service: ecs_patterns.ApplicationLoadBalancedFargateService
    output_manager: OutputManager

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: DeploymentConfig,
        **kwargs: Any,
    ) -> None:
        """Initialize the stack from a deployment configuration.

        Args:
            scope: CDK construct scope for resource creation.
            construct_id: Unique identifier for this stack.
            config: Deployment configuration.
            **kwargs: Additional arguments passed to parent Stack. When no
                ``env`` is given, the configuration's account and region are used.
        """
        kwargs.setdefault("env", config.to_environment())
        super().__init__(scope, construct_id, **kwargs)

        self.config = config
        self.topology = plan_topology(config, region=self.region)
        self.output_manager = OutputManager(self, self.stack_name)

        logger.info(
            "Building stack %s: image %s:%s on port %d, profile %s",
            construct_id,
            config.repo_name,
            config.image_tag,
            config.container_port,
            config.spring_profile,
        )

        self._create_vpc()
        self._create_cluster()
        self._create_log_group()
        self.execution_role = self._create_role(self.topology.service.task.execution_role)
        self.task_role = self._create_role(self.topology.service.task.task_role)
        self._create_task_definition()
        self._create_container(self.topology.service.task.container)
        self._create_service()
        self._configure_health_check()
        self._create_outputs()
        self._configure_security_checks()

    def _configure_security_checks(self) -> None:
        """Applies AWS Solutions checks and records the accepted trade-offs.

        The suppressions cover the public-only network without NAT gateways,
        the public task IPs behind an internet-facing load balancer, and the
        DynamoDB full access granted to both roles.
        """
        Aspects.of(self).add(cdk_nag.AwsSolutionsChecks())
        NagSuppressions.add_stack_suppressions(
            stack=self,
            suppressions=SECURITY_CHECK_SUPPRESSIONS,
        )
        logger.debug(
            "Suppressed %d security checks on %s",
            len(SECURITY_CHECK_SUPPRESSIONS),
            self.stack_name,
        )

    def _create_vpc(self) -> None:
        """Create the VPC with public subnets only and no NAT gateways."""
        network = self.topology.network
        self.vpc = ec2.Vpc(
            self,
            "Vpc",
            max_azs=network.max_azs,
            nat_gateways=network.nat_gateways,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name=network.subnet_group,
                    subnet_type=ec2.SubnetType.PUBLIC,
                ),
            ],
        )

    def _create_cluster(self) -> None:
        self.cluster = ecs.Cluster(self, "Cluster", vpc=self.vpc)

    def _create_log_group(self) -> None:
        """Create CloudWatch log group for the application container."""
        self.log_group = logs.LogGroup(
            self,
            "AppLogs",
            retention=self.topology.log_retention,
        )

    def _create_role(self, policy: RolePolicy) -> iam.Role:
        """Create an IAM role trusted by ECS tasks.

        Args:
            policy: Role description with its managed policy names.

        Returns:
            The created role.
        """
        role = iam.Role(
            self,
            policy.construct_id,
            assumed_by=iam.ServicePrincipal(policy.trusted_principal),
            description=policy.description,
        )
        for policy_name in policy.managed_policies:
            role.add_managed_policy(
                iam.ManagedPolicy.from_aws_managed_policy_name(policy_name),
            )
        return role

    def _create_task_definition(self) -> None:
        task = self.topology.service.task
        self.task_definition = ecs.FargateTaskDefinition(
            self,
            "TaskDef",
            cpu=task.cpu,
            memory_limit_mib=task.memory_mib,
            execution_role=self.execution_role,
            task_role=self.task_role,
        )

    def _create_container(self, spec: ContainerSpec) -> None:
        """Add the application container to the task definition.

        The image is a reference to an existing ECR repository and tag; it is
        resolved by ECS when the task starts.
        """
        repository = ecr.Repository.from_repository_name(self, "Repo", spec.repo_name)
        self.container = self.task_definition.add_container(
            spec.construct_id,
            image=ecs.ContainerImage.from_ecr_repository(repository, spec.image_tag),
            logging=ecs.LogDrivers.aws_logs(
                stream_prefix=spec.stream_prefix,
                log_group=self.log_group,
            ),
            environment=dict(spec.environment),
        )
        self.container.add_port_mappings(
            ecs.PortMapping(container_port=spec.container_port),
        )

    def _create_service(self) -> None:
        """Create the Fargate service behind a public Application Load Balancer.

        Tasks run in the public subnets with public IPs since the VPC has no
        NAT gateway for image pulls and outbound traffic.
        """
        service = self.topology.service
        self.service = ecs_patterns.ApplicationLoadBalancedFargateService(
            self,
            "Service",
            cluster=self.cluster,
            task_definition=self.task_definition,
            desired_count=service.desired_count,
            public_load_balancer=service.public_load_balancer,
            assign_public_ip=service.assign_public_ip,
        )

    def _configure_health_check(self) -> None:
        health_check = self.topology.service.health_check
        self.service.target_group.configure_health_check(
            path=health_check.path,
            healthy_http_codes=health_check.healthy_http_codes,
            interval=Duration.seconds(health_check.interval_seconds),
        )

    def _create_outputs(self) -> None:
        self.output_manager.add_output(
            self.topology.output_id,
            self.get_load_balancer_dns_name(),
            "Public DNS name of the Application Load Balancer",
        )

    def get_load_balancer_dns_name(self) -> str:
        """Get the load balancer public DNS name.

        Returns:
            Load balancer DNS name.
        """
        return self.service.load_balancer.load_balancer_dns_name

    def get_cluster_name(self) -> str:
        return self.cluster.cluster_name

    def get_service_name(self) -> str:
        return self.service.service.service_name

    def get_log_group_name(self) -> str:
        return self.log_group.log_group_name

    def get_execution_role_arn(self) -> str:
        """Get execution role ARN for ECS integration.

        Returns:
            Execution role ARN.
        """
        return self.execution_role.role_arn

    def get_task_role_arn(self) -> str:
        """Get task role ARN for ECS integration.

        Returns:
            Task role ARN.
        """
        return self.task_role.role_arn
