"""Tests for the CDK application entry point."""

from unittest.mock import MagicMock, patch

from aws_cdk import Stack
from aws_cdk.assertions import Template

from app import create_deployment_environment, initialize_app  # type: ignore
from ecs_spring_stack import EcsStack


def get_stack(app, stack_id: str) -> EcsStack:
    stack = app.node.find_child(stack_id)
    assert isinstance(stack, EcsStack)
    return stack


class TestCreateDeploymentEnvironment:
    def test_uses_config_without_profile(self, deployment_config):
        env = create_deployment_environment(deployment_config)

        assert env.account == "123456789012"
        assert env.region == "us-east-1"

    @patch("boto3.Session")
    def test_resolves_account_from_profile(self, mock_session_cls, deployment_config):
        mock_session = MagicMock()
        mock_session.region_name = "eu-west-1"
        mock_session.client.return_value.get_caller_identity.return_value = {
            "Account": "111122223333",
        }
        mock_session_cls.return_value = mock_session

        env = create_deployment_environment(deployment_config, aws_profile="deploy")

        mock_session_cls.assert_called_once_with(profile_name="deploy")
        mock_session.client.assert_called_once_with("sts")
        assert env.account == "111122223333"
        assert env.region == "eu-west-1"

    @patch("boto3.Session")
    def test_profile_without_region_keeps_config_region(self, mock_session_cls, deployment_config):
        mock_session = MagicMock()
        mock_session.region_name = None
        mock_session.client.return_value.get_caller_identity.return_value = {
            "Account": "111122223333",
        }
        mock_session_cls.return_value = mock_session

        env = create_deployment_environment(deployment_config, aws_profile="deploy")

        assert env.region == "us-east-1"


class TestInitializeApp:
    def test_builds_stack_from_config(self, deployment_config):
        app = initialize_app(config=deployment_config)
        stack = get_stack(app, "EcsFargateSpringStack")

        assert stack.config == deployment_config
        Template.from_stack(stack).resource_count_is("AWS::ECS::Service", 1)

    def test_loads_config_when_omitted(self):
        app = initialize_app()
        stack = get_stack(app, "EcsFargateSpringStack")

        assert stack.config.repo_name == "backend/java"
        assert stack.config.container_port == 8080
        assert stack.region == "us-east-1"

    def test_standard_tags(self, deployment_config):
        app = initialize_app(config=deployment_config, environment="prod")
        stack = get_stack(app, "EcsFargateSpringStack")
        tags = stack.tags.tag_values()

        assert tags["Environment"] == "prod"
        assert tags["Application"] == "EcsFargateSpringStack"
        assert tags["ManagedBy"] == "AWS-CDK"

    def test_only_one_stack(self, deployment_config):
        app = initialize_app(config=deployment_config)
        stacks = [child for child in app.node.children if isinstance(child, Stack)]

        assert len(stacks) == 1
