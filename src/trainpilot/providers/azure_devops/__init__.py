"""Azure DevOps provider package."""

from trainpilot.providers.azure_devops.provider import AzureDevOpsProvider

__all__ = ["AzureDevOpsProvider"]
