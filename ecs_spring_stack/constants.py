"""Configuration constants for the Spring Boot service deployment.

This module defines the fixed deployment parameters of the ECS Fargate
service: task capacity, log retention, health check policy, IAM managed
policies and the environment variable names read by the application.
"""

from typing import Final

from aws_cdk import aws_logs as logs

DEFAULT_STACK_ID: Final[str] = "EcsFargateSpringStack"
DEFAULT_REGION: Final[str] = "us-east-1"
DEFAULT_SPRING_PROFILE: Final[str] = "prod"

# Reference deployment values, overridable through CDK context
DEFAULT_REPO_NAME: Final[str] = "backend/java"
DEFAULT_IMAGE_TAG: Final[str] = "develop"
DEFAULT_CONTAINER_PORT: Final[int] = 8080
DEFAULT_TABLE_NAME: Final[str] = "fondo-btg-pactual-develop"

MAX_AZS: Final[int] = 2
NAT_GATEWAYS: Final[int] = 0
PUBLIC_SUBNET_NAME: Final[str] = "public"

TASK_CPU: Final[int] = 512
TASK_MEMORY_MIB: Final[int] = 1024
DESIRED_COUNT: Final[int] = 1

LOG_RETENTION: Final[logs.RetentionDays] = logs.RetentionDays.ONE_WEEK
LOG_STREAM_PREFIX: Final[str] = "app"

HEALTH_CHECK_PATH: Final[str] = "/actuator/health"
HEALTHY_HTTP_CODES: Final[str] = "200-399"
HEALTH_CHECK_INTERVAL_SECONDS: Final[int] = 30

ECS_TASKS_PRINCIPAL: Final[str] = "ecs-tasks.amazonaws.com"
TASK_EXECUTION_POLICY: Final[str] = "service-role/AmazonECSTaskExecutionRolePolicy"
DYNAMODB_FULL_ACCESS_POLICY: Final[str] = "AmazonDynamoDBFullAccess"

ENV_TABLE_NAME: Final[str] = "TABLE_DYNAMODB"
ENV_SPRING_PROFILE: Final[str] = "SPRING_PROFILES_ACTIVE"
ENV_AWS_REGION: Final[str] = "AWS_REGION"

LOAD_BALANCER_DNS_OUTPUT: Final[str] = "LoadBalancerDNS"

# Valid Fargate memory sizes (MiB) per CPU unit value
FARGATE_CPU_MEMORY: Final[dict[int, tuple[int, ...]]] = {
    256: (512, 1024, 2048),
    512: tuple(range(1024, 4097, 1024)),
    1024: tuple(range(2048, 8193, 1024)),
    2048: tuple(range(4096, 16385, 1024)),
    4096: tuple(range(8192, 30721, 1024)),
}
