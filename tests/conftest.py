"""Global pytest configuration and fixtures for CDK testing."""

import os
import sys
from pathlib import Path

import pytest

# Add the project root to Python path so app.py can be imported
project_path = Path(__file__).parent.parent
if str(project_path) not in sys.path:
    sys.path.insert(0, str(project_path))

from ecs_spring_stack import DeploymentConfig  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def configure_test_environment():
    """Configure environment variables for consistent testing."""
    test_env = {
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_REGION": "us-east-1",
        "CDK_DEFAULT_REGION": "us-east-1",
        "CDK_DEFAULT_ACCOUNT": "123456789012",
        "CDK_DISABLE_VERSION_CHECK": "true",
        # Prevent actual AWS API calls during testing
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
    }

    for key, value in test_env.items():
        if key not in os.environ:
            os.environ[key] = value


@pytest.fixture
def deployment_config():
    """Reference deployment with the Spring profile left at its default."""
    return DeploymentConfig(
        repo_name="backend/java",
        image_tag="develop",
        container_port=8080,
        table_name="fondo-btg-pactual-develop",
        account="123456789012",
        region="us-east-1",
    )
