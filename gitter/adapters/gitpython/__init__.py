from gitter.adapters.gitpython.gitpython_adapter import GitPythonRepo

__all__ = ["GitPythonRepo"]
