from gitter.adapters.git_cmd.git_adapter import RunnerGitRepo

__all__ = ["RunnerGitRepo"]
