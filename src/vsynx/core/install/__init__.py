"""Install+Sync shortcut for marketplace results."""

from vsynx.core.install.workflow import InstallSyncWorkflow

__all__ = ["InstallSyncWorkflow"]
