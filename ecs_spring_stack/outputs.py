"""Output Manager for AWS CDK stacks.

This module provides a class that consistently handles CloudFormation
outputs for the Spring service stack.
"""

import logging

from aws_cdk import CfnOutput
from constructs import Construct

logger = logging.getLogger(__name__)


class OutputManager:
    """Consistent management of CloudFormation outputs.

    Attributes:
        scope: The construct for which outputs are being managed.
        stack_name: The name of the stack owning the outputs.
        outputs: Outputs created so far, keyed by construct id.
    """

    def __init__(self, scope: Construct, stack_name: str) -> None:
        self.scope = scope
        self.stack_name = stack_name
        self.outputs: dict[str, CfnOutput] = {}

    def add_output(
        self,
        id_: str,
        value: str,
        description: str,
        export_name: str | None = None,
    ) -> CfnOutput:
        """Creates a CloudFormation output.

        Args:
            id_: Unique identifier for the output.
            value: The value returned by the aws cloudformation describe-stacks command.
            description: A String type that describes the output value.
            export_name: Optional name used to export the value across stacks.

        Returns:
            The created output.
        """
        output = CfnOutput(
            self.scope,
            id_,
            value=value,
            description=description,
            export_name=export_name,
        )
        self.outputs[id_] = output
        logger.debug("Added output %s to stack %s", id_, self.stack_name)
        return output
