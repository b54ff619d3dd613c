from devkit_deploy.tui.renderers import DeployConsoleUI

__all__ = ["DeployConsoleUI"]
